from django.urls import path, include
from rest_framework.routers import DefaultRouter
from . import views

app_name = 'milk'

router = DefaultRouter()
router.register(r'', views.MilkCollectionViewSet, basename='collection')

urlpatterns = [
    # GET    /api/collections/        - List collections (with summary)
    # POST   /api/collections/        - Record a collection (admin)
    # GET    /api/collections/{id}/   - Get collection details
    path('', include(router.urls)),
]
