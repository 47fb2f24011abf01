"""URL routing for badges."""

from django.urls import include, path  # type: ignore
from rest_framework.routers import DefaultRouter  # type: ignore

from .views import BadgeViewSet

router = DefaultRouter()
router.register(r'', BadgeViewSet, basename='badge')

urlpatterns = [path('', include(router.urls))]
