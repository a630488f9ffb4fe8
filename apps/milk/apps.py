from django.apps import AppConfig


class MilkConfig(AppConfig):
    default_auto_field = 'django.db.models.BigAutoField'
    name = 'apps.milk'
    label = 'milk'
    verbose_name = 'Milk Collections'
