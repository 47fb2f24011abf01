"""URL routing for workshop services."""

from django.urls import include, path  # type: ignore
from rest_framework.routers import DefaultRouter  # type: ignore

from .views import ServiceViewSet

router = DefaultRouter()
router.register(r'', ServiceViewSet, basename='service')

urlpatterns = [path('', include(router.urls))]
