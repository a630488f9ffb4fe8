import uuid
from decimal import Decimal
from django.conf import settings
import django.core.validators
from django.db import migrations, models
import django.db.models.deletion
import django.utils.timezone


class Migration(migrations.Migration):

    initial = True

    dependencies = [
        migrations.swappable_dependency(settings.AUTH_USER_MODEL),
    ]

    operations = [
        migrations.CreateModel(
            name='MilkCollection',
            fields=[
                ('id', models.UUIDField(default=uuid.uuid4, editable=False, primary_key=True, serialize=False)),
                ('quantity', models.DecimalField(decimal_places=2, help_text='Liters delivered', max_digits=10, validators=[django.core.validators.MinValueValidator(Decimal('0.01'))])),
                ('fat_percentage', models.DecimalField(decimal_places=2, max_digits=4, validators=[django.core.validators.MinValueValidator(Decimal('0')), django.core.validators.MaxValueValidator(Decimal('10'))])),
                ('snf', models.DecimalField(decimal_places=2, default=Decimal('8.50'), help_text='Solids-not-fat percentage', max_digits=4, validators=[django.core.validators.MinValueValidator(Decimal('0')), django.core.validators.MaxValueValidator(Decimal('15'))])),
                ('is_billed', models.BooleanField(default=False)),
                ('created_at', models.DateTimeField(db_index=True, default=django.utils.timezone.now)),
                ('updated_at', models.DateTimeField(auto_now=True)),
                ('farmer', models.ForeignKey(on_delete=django.db.models.deletion.PROTECT, related_name='milk_collections', to=settings.AUTH_USER_MODEL)),
            ],
            options={
                'db_table': 'milk_collections',
                'ordering': ['-created_at'],
                'indexes': [
                    models.Index(fields=['is_billed', 'created_at'], name='milk_coll_billed_created_idx'),
                    models.Index(fields=['farmer', 'created_at'], name='milk_coll_farmer_created_idx'),
                ],
            },
        ),
    ]
