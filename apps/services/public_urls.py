"""URL routing for the public service catalogue."""

from django.urls import include, path  # type: ignore
from rest_framework.routers import DefaultRouter  # type: ignore

from .views import PublicServiceViewSet

router = DefaultRouter()
router.register(r'', PublicServiceViewSet, basename='public-service')

urlpatterns = [path('', include(router.urls))]
