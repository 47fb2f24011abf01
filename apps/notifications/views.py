"""API views for notification settings and the newsletter."""

from __future__ import annotations

import logging

from django.conf import settings  # type: ignore
from django.http import HttpResponse, JsonResponse  # type: ignore
from django.utils.decorators import method_decorator  # type: ignore
from django.utils.html import escape  # type: ignore
from django.views.decorators.http import require_GET  # type: ignore
from django_ratelimit.decorators import ratelimit  # type: ignore
from rest_framework import mixins, permissions, status, viewsets  # type: ignore
from rest_framework.response import Response  # type: ignore
from rest_framework.views import APIView  # type: ignore

from . import newsletter
from .models import NewsletterSubscriber, NotificationSettings
from .serializers import (
    NewsletterSubscribeSerializer,
    NewsletterSubscriberSerializer,
    NotificationSettingsSerializer,
)

logger = logging.getLogger(__name__)


def client_ip(request) -> str | None:  # type: ignore
    forwarded = request.META.get("HTTP_X_FORWARDED_FOR")
    if forwarded:
        return forwarded.split(",")[0].strip()
    return request.META.get("REMOTE_ADDR")


class NotificationSettingsView(APIView):
    """GET/PATCH the global notification toggles."""

    def get(self, request):  # type: ignore
        serializer = NotificationSettingsSerializer(NotificationSettings.load())
        return Response(serializer.data)

    def patch(self, request):  # type: ignore
        serializer = NotificationSettingsSerializer(
            NotificationSettings.load(), data=request.data, partial=True
        )
        serializer.is_valid(raise_exception=True)
        serializer.save()
        logger.info(f"Notification settings updated by {request.user.email}")
        return Response(serializer.data)


class NewsletterSubscribeView(APIView):
    permission_classes = [permissions.AllowAny]
    authentication_classes: list = []

    @method_decorator(ratelimit(key="ip", rate=settings.NEWSLETTER_RATE, method="POST", block=False))
    def post(self, request):  # type: ignore
        if getattr(request, "limited", False):
            logger.warning(f"Newsletter rate limit exceeded for IP: {client_ip(request)}")
            return Response(
                {"success": False, "error": "Too many requests. Please try again later."},
                status=status.HTTP_429_TOO_MANY_REQUESTS,
            )

        serializer = NewsletterSubscribeSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)
        newsletter.subscribe(
            serializer.validated_data["email"],
            source=serializer.validated_data["source"],
            ip_address=client_ip(request),
            user_agent=request.META.get("HTTP_USER_AGENT", ""),
        )
        return Response(
            {"success": True, "message": "Thanks for subscribing!"},
            status=status.HTTP_201_CREATED,
        )


@require_GET
def newsletter_unsubscribe(request):  # type: ignore
    """One-click unsubscribe link from the newsletter emails."""
    token = request.GET.get("email") or request.GET.get("e") or ""
    if not token:
        return JsonResponse({"success": False, "error": "Missing param"}, status=400)

    email = newsletter.decode_email_token(token)
    if email is None:
        return JsonResponse({"success": False, "error": "Invalid param"}, status=400)

    try:
        newsletter.unsubscribe(email)
    except Exception as e:
        logger.error(f"Failed to unsubscribe {email}: {e}", exc_info=True)
        return JsonResponse({"success": False, "error": "Server error"}, status=500)

    html = (
        '<!doctype html><html><head><meta charset="utf-8"><title>Unsubscribed</title></head>'
        '<body style="font-family: Arial, sans-serif; padding:40px; text-align:center;">'
        "<h1>You're unsubscribed</h1>"
        f"<p>{escape(email)} has been removed from our newsletter list.</p>"
        "</body></html>"
    )
    return HttpResponse(html, content_type="text/html; charset=utf-8")


class NewsletterSubscriberViewSet(mixins.ListModelMixin, viewsets.GenericViewSet):
    """Dashboard list of newsletter subscribers."""

    serializer_class = NewsletterSubscriberSerializer

    def get_queryset(self):  # type: ignore
        queryset = NewsletterSubscriber.objects.all()
        subscribed = self.request.query_params.get("subscribed")
        if subscribed is not None:
            queryset = queryset.filter(subscribed=subscribed.lower() in ("1", "true", "yes"))
        return queryset
