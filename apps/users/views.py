"""Profile endpoints for the signed-in team member."""

from __future__ import annotations

import logging

from rest_framework import generics, permissions, status  # type: ignore
from rest_framework.parsers import FormParser, MultiPartParser  # type: ignore
from rest_framework.response import Response  # type: ignore
from rest_framework.views import APIView  # type: ignore

from apps.core.storage import ImageValidationError, get_image_storage

from .auth_serializers import ChangePasswordSerializer
from .serializers import UserSerializer

logger = logging.getLogger(__name__)


class ProfileView(generics.RetrieveUpdateAPIView):
    """GET/PATCH the current user's profile."""

    serializer_class = UserSerializer
    permission_classes = [permissions.IsAuthenticated]
    http_method_names = ["get", "patch", "head", "options"]

    def get_object(self):  # type: ignore
        return self.request.user


class ChangePasswordView(APIView):
    permission_classes = [permissions.IsAuthenticated]

    def post(self, request):  # type: ignore
        serializer = ChangePasswordSerializer(data=request.data, context={"request": request})
        serializer.is_valid(raise_exception=True)
        serializer.save()
        return Response({"success": True, "detail": "Password updated."}, status=status.HTTP_200_OK)


class AvatarUploadView(APIView):
    permission_classes = [permissions.IsAuthenticated]
    parser_classes = [MultiPartParser, FormParser]

    def post(self, request):  # type: ignore
        upload = request.FILES.get("file")
        if upload is None:
            return Response({"success": False, "error": "No file provided."}, status=status.HTTP_400_BAD_REQUEST)
        try:
            stored = get_image_storage("avatars").upload(upload)
        except ImageValidationError as exc:
            return Response({"success": False, "error": str(exc)}, status=status.HTTP_400_BAD_REQUEST)

        serializer = UserSerializer(request.user, data={"avatar_url": stored["url"]}, partial=True)
        serializer.is_valid(raise_exception=True)
        serializer.save()
        logger.info(f"Avatar updated for {request.user.email}")
        return Response({"success": True, "avatar_url": stored["url"]}, status=status.HTTP_200_OK)
