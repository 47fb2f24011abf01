"""URL routing for the public storefront."""

from django.urls import include, path  # type: ignore
from rest_framework.routers import DefaultRouter  # type: ignore

from .views import StorefrontProductViewSet

router = DefaultRouter()
router.register(r'products', StorefrontProductViewSet, basename='storefront-product')

urlpatterns = [path('', include(router.urls))]
