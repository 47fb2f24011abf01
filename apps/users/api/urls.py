"""URL routing for the team management API."""

from django.urls import path, include  # type: ignore
from rest_framework.routers import DefaultRouter  # type: ignore

from .views import TeamMemberViewSet

router = DefaultRouter()
router.register(r"", TeamMemberViewSet, basename="team-member")

urlpatterns = [
    path("", include(router.urls)),
]
