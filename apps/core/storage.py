"""S3-compatible storage for product and avatar images.

Uploads are validated with Pillow, downscaled to PHOTO_MAX_DIMENSION and
re-encoded (JPEG, or WEBP when the image has transparency) before they are
written to the bucket. The object key doubles as the image ``public_id``
stored on ``ProductImage`` so the dashboard can delete it later.
"""

from __future__ import annotations

import hashlib
import logging
import uuid
from functools import lru_cache
from io import BytesIO

import boto3
from botocore.client import Config as BotoConfig
from botocore.exceptions import ClientError, EndpointConnectionError
from django.conf import settings  # type: ignore
from django.core.files.storage import Storage  # type: ignore
from PIL import Image, UnidentifiedImageError

logger = logging.getLogger(__name__)

ALLOWED_FORMATS = ("JPEG", "PNG", "WEBP")


class ImageValidationError(ValueError):
    """Raised when an uploaded file is not an acceptable image."""


class S3ImageStorage(Storage):
    """Django storage backend writing optimized images to S3 or MinIO."""

    def __init__(self, folder: str = "products"):
        self.folder = folder.strip("/")
        self.bucket_name = settings.S3_BUCKET_NAME
        self.public_base = (settings.S3_PUBLIC_BASE or "").rstrip("/")
        self.max_size = settings.PHOTO_MAX_SIZE
        self.max_dimension = settings.PHOTO_MAX_DIMENSION
        self.s3_client = boto3.client(
            "s3",
            endpoint_url=settings.S3_ENDPOINT_URL,
            aws_access_key_id=settings.S3_ACCESS_KEY,
            aws_secret_access_key=settings.S3_SECRET_KEY,
            region_name=settings.S3_REGION,
            config=BotoConfig(signature_version="s3v4", s3={"addressing_style": "path"}),
            use_ssl=settings.S3_USE_SSL,
        )

    # ---------- image utils ----------

    def validate_image(self, file_obj) -> Image.Image:  # type: ignore
        size = getattr(file_obj, "size", None)
        if size is not None and size > self.max_size:
            raise ImageValidationError(
                f"File is too large. Maximum size is {self.max_size / 1024 / 1024:.1f} MB"
            )
        try:
            img = Image.open(file_obj)
            img.load()
        except (UnidentifiedImageError, OSError) as exc:
            raise ImageValidationError(f"Invalid image: {exc}") from exc
        if img.format not in ALLOWED_FORMATS:
            raise ImageValidationError(f"Unsupported image format: {img.format}")
        return img

    def optimize_image(self, img: Image.Image, quality: int = 85) -> tuple[BytesIO, str, str]:
        """Return (buffer, extension, content type) for the re-encoded image."""
        if img.mode not in ("RGB", "RGBA"):
            img = img.convert("RGB")
        if img.width > self.max_dimension or img.height > self.max_dimension:
            img.thumbnail((self.max_dimension, self.max_dimension), Image.Resampling.LANCZOS)

        out = BytesIO()
        if img.mode == "RGBA":
            img.save(out, format="WEBP", quality=quality, method=6)
            ext, content_type = "webp", "image/webp"
        else:
            img.save(out, format="JPEG", quality=quality, optimize=True)
            ext, content_type = "jpg", "image/jpeg"
        out.seek(0)
        return out, ext, content_type

    def _build_key(self, payload: bytes, ext: str) -> str:
        digest = hashlib.md5(payload).hexdigest()[:8]
        return f"{self.folder}/{digest}_{uuid.uuid4().hex[:8]}.{ext}"

    # ---------- Storage API ----------

    def _save(self, name, content):  # type: ignore
        content.seek(0)
        img = self.validate_image(content)
        optimized, ext, content_type = self.optimize_image(img)
        key = self._build_key(optimized.getvalue(), ext)
        try:
            self.s3_client.put_object(
                Bucket=self.bucket_name,
                Key=key,
                Body=optimized.getvalue(),
                ContentType=content_type,
                CacheControl="max-age=31536000",
                Metadata={"original_name": str(name)},
            )
        except (EndpointConnectionError, ClientError) as exc:
            logger.error(f"S3 upload failed for {name}: {exc}", exc_info=True)
            raise
        logger.info(f"Uploaded image {key}")
        return key

    def delete(self, name):  # type: ignore
        try:
            self.s3_client.delete_object(Bucket=self.bucket_name, Key=name)
            logger.info(f"Deleted image {name}")
        except (EndpointConnectionError, ClientError) as exc:
            logger.error(f"S3 delete failed for {name}: {exc}", exc_info=True)

    def exists(self, name):  # type: ignore
        try:
            self.s3_client.head_object(Bucket=self.bucket_name, Key=name)
            return True
        except ClientError:
            return False

    def url(self, name):  # type: ignore
        if self.public_base:
            return f"{self.public_base}/{name.lstrip('/')}"
        return self.s3_client.generate_presigned_url(
            "get_object",
            Params={"Bucket": self.bucket_name, "Key": name},
            ExpiresIn=7 * 24 * 3600,
        )

    # ---------- helpers used by the API ----------

    def upload(self, file_obj) -> dict[str, str]:  # type: ignore
        """Store an uploaded file and return its ``url`` and ``public_id``."""
        key = self.save(getattr(file_obj, "name", "upload"), file_obj)
        return {"url": self.url(key), "public_id": key}

    def delete_many(self, keys) -> None:  # type: ignore
        for key in keys:
            if key:
                self.delete(key)


@lru_cache(maxsize=None)
def get_image_storage(folder: str = "products") -> S3ImageStorage:
    return S3ImageStorage(folder=folder)
