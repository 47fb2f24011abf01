"""Workshop service API: dashboard CRUD plus the public catalogue."""

from __future__ import annotations

from django_filters.rest_framework import DjangoFilterBackend  # type: ignore
from rest_framework import permissions, viewsets  # type: ignore
from rest_framework.decorators import action  # type: ignore
from rest_framework.filters import OrderingFilter  # type: ignore
from rest_framework.response import Response  # type: ignore

from . import services
from .filters import ServiceFilterSet
from .models import Service
from .serializers import ServiceSerializer


class ServiceViewSet(viewsets.ModelViewSet):
    queryset = Service.objects.all()
    serializer_class = ServiceSerializer
    filter_backends = [DjangoFilterBackend, OrderingFilter]
    filterset_class = ServiceFilterSet
    ordering_fields = ["title", "price", "duration", "created_at"]

    @action(detail=True, methods=["post"], url_path="toggle-active")
    def toggle_active(self, request, pk=None):  # type: ignore
        service = services.toggle_service_active(self.get_object())
        return Response(ServiceSerializer(service).data)

    @action(detail=False, methods=["get"])
    def stats(self, request):  # type: ignore
        return Response(services.service_stats())


class PublicServiceViewSet(viewsets.ReadOnlyModelViewSet):
    """Active services for the storefront, looked up by slug."""

    serializer_class = ServiceSerializer
    permission_classes = [permissions.AllowAny]
    authentication_classes: list = []
    pagination_class = None
    lookup_field = "slug"

    def get_queryset(self):  # type: ignore
        return Service.objects.filter(is_active=True)
