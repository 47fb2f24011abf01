"""URL routing for notification settings."""

from django.urls import path  # type: ignore

from .views import NotificationSettingsView

urlpatterns = [
    path('settings/', NotificationSettingsView.as_view(), name='notification-settings'),
]
