from django.urls import path, include
from rest_framework.routers import DefaultRouter
from . import views

app_name = 'billing'

router = DefaultRouter()
router.register(r'payments', views.PaymentViewSet, basename='payment')

urlpatterns = [
    # POST   /api/billing/generate/                    - Run billing (admin)
    path('generate/', views.generate_billing, name='generate'),

    # GET    /api/billing/payments/                    - List payments (with summary)
    # GET    /api/billing/payments/{id}/               - Payment details
    # POST   /api/billing/payments/{id}/mark_paid/     - Settle payment (admin)
    path('', include(router.urls)),
]
