"""Team management API (Settings > Team in the dashboard)."""

from __future__ import annotations

from rest_framework import mixins, status, viewsets  # type: ignore
from rest_framework.response import Response  # type: ignore

from apps.users import services
from apps.users.models import Admin

from .permissions import IsDashboardAdmin
from .serializers import (
    TeamMemberCreateSerializer,
    TeamMemberSerializer,
    TeamMemberUpdateSerializer,
)


class TeamMemberViewSet(
    mixins.ListModelMixin,
    mixins.RetrieveModelMixin,
    viewsets.GenericViewSet,
):
    """
    Endpoints:
    - GET /api/v1/team/ - list team members
    - POST /api/v1/team/ - invite a new member
    - PATCH /api/v1/team/{id}/ - update role, status, name or phone
    - DELETE /api/v1/team/{id}/ - revoke dashboard access
    """

    queryset = Admin.objects.select_related("user").all()
    permission_classes = [IsDashboardAdmin]
    serializer_class = TeamMemberSerializer
    pagination_class = None

    def get_queryset(self):  # type: ignore
        return services.team_members()

    def create(self, request, *args, **kwargs):  # type: ignore
        serializer = TeamMemberCreateSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)
        member = services.add_team_member(invited_by=request.user, **serializer.validated_data)
        return Response(TeamMemberSerializer(member).data, status=status.HTTP_201_CREATED)

    def partial_update(self, request, *args, **kwargs):  # type: ignore
        member = self.get_object()
        serializer = TeamMemberUpdateSerializer(data=request.data, partial=True)
        serializer.is_valid(raise_exception=True)
        member = services.update_team_member(member, **serializer.validated_data)
        return Response(TeamMemberSerializer(member).data)

    def destroy(self, request, *args, **kwargs):  # type: ignore
        member = self.get_object()
        services.remove_team_member(member, acting_user=request.user)
        return Response(status=status.HTTP_204_NO_CONTENT)
