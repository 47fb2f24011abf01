"""URL declarations for the current user's profile."""

from __future__ import annotations

from django.urls import path  # type: ignore

from .views import AvatarUploadView, ChangePasswordView, ProfileView

urlpatterns = [
    path('', ProfileView.as_view(), name='profile'),
    path('password/', ChangePasswordView.as_view(), name='profile-password'),
    path('avatar/', AvatarUploadView.as_view(), name='profile-avatar'),
]
