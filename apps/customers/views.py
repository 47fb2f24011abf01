"""Customer directory API."""

from __future__ import annotations

from django.db.models import Count  # type: ignore
from django_filters.rest_framework import DjangoFilterBackend  # type: ignore
from rest_framework import status, viewsets  # type: ignore
from rest_framework.decorators import action  # type: ignore
from rest_framework.filters import OrderingFilter  # type: ignore
from rest_framework.response import Response  # type: ignore

from . import services
from .filters import CustomerFilterSet
from .models import Customer
from .serializers import CustomerHistorySerializer, CustomerSerializer


class CustomerViewSet(viewsets.ModelViewSet):
    serializer_class = CustomerSerializer
    filter_backends = [DjangoFilterBackend, OrderingFilter]
    filterset_class = CustomerFilterSet
    ordering_fields = ["name", "created_at"]

    def get_queryset(self):  # type: ignore
        return Customer.objects.annotate(
            order_count=Count("orders", distinct=True),
            booking_count=Count("bookings", distinct=True),
        ).order_by("-created_at")

    @action(detail=True, methods=["post"], url_path="toggle-vip")
    def toggle_vip(self, request, pk=None):  # type: ignore
        customer = services.toggle_vip(self.get_object())
        return Response(CustomerSerializer(customer).data)

    @action(detail=True, methods=["get"])
    def history(self, request, pk=None):  # type: ignore
        history = services.customer_history(self.get_object())
        return Response(CustomerHistorySerializer(history).data)

    @action(detail=False, methods=["get"])
    def stats(self, request):  # type: ignore
        return Response(services.customer_stats())

    @action(detail=False, methods=["get"])
    def lookup(self, request):  # type: ignore
        customer = services.lookup_customer(request.query_params.get("q", ""))
        if customer is None:
            return Response({"success": False, "error": "Customer not found"}, status=status.HTTP_404_NOT_FOUND)
        return Response(CustomerSerializer(customer).data)
