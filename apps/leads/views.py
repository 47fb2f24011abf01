"""Lead API views."""

from __future__ import annotations

from django.conf import settings  # type: ignore
from django.utils.decorators import method_decorator  # type: ignore
from django_filters.rest_framework import DjangoFilterBackend  # type: ignore
from django_ratelimit.decorators import ratelimit  # type: ignore
from rest_framework import permissions, status, viewsets  # type: ignore
from rest_framework.decorators import action  # type: ignore
from rest_framework.filters import OrderingFilter  # type: ignore
from rest_framework.response import Response  # type: ignore
from rest_framework.views import APIView  # type: ignore

from apps.notifications import whatsapp

from . import services
from .filters import LeadFilterSet
from .models import Lead
from .serializers import ContactFormSerializer, LeadSerializer, LeadStatusSerializer


class LeadViewSet(viewsets.ModelViewSet):
    queryset = Lead.objects.all()
    serializer_class = LeadSerializer
    filter_backends = [DjangoFilterBackend, OrderingFilter]
    filterset_class = LeadFilterSet
    ordering_fields = ["created_at", "status", "name"]
    ordering = ["-created_at"]

    @action(detail=True, methods=["post", "patch"], url_path="status")
    def change_status(self, request, pk=None):  # type: ignore
        serializer = LeadStatusSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)
        lead = services.update_lead_status(
            self.get_object(),
            serializer.validated_data["status"],
            serializer.validated_data.get("notes"),
        )
        return Response(LeadSerializer(lead).data)

    @action(detail=True, methods=["get"])
    def whatsapp(self, request, pk=None):  # type: ignore
        lead = self.get_object()
        return Response(
            {
                "acknowledgment_url": whatsapp.lead_notification_url(lead, "customer_ack"),
                "internal_url": whatsapp.lead_notification_url(lead, "internal"),
            }
        )

    @action(detail=False, methods=["get"])
    def stats(self, request):  # type: ignore
        return Response(services.lead_stats())

    @action(detail=False, methods=["get"])
    def recent(self, request):  # type: ignore
        return Response(LeadSerializer(services.recent_leads(), many=True).data)


@method_decorator(
    ratelimit(key="ip", rate=settings.LEAD_RATE, method="POST", block=False),
    name="post",
)
class ContactFormView(APIView):
    permission_classes = [permissions.AllowAny]
    authentication_classes: list = []

    def post(self, request):  # type: ignore
        if getattr(request, "limited", False):
            return Response(
                {"success": False, "error": "Too many requests. Please try again later."},
                status=status.HTTP_429_TOO_MANY_REQUESTS,
            )
        serializer = ContactFormSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)
        lead = services.create_lead({**serializer.validated_data, "source": Lead.Source.CONTACT_FORM})
        return Response(
            {"success": True, "message": "Thank you! We will get back to you within 24 hours.", "id": lead.pk},
            status=status.HTTP_201_CREATED,
        )
