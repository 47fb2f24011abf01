"""ASGI entry point for the Shahzaib Autos API."""

import os
from django.core.asgi import get_asgi_application  # type: ignore

# Development settings by default; servers override DJANGO_SETTINGS_MODULE.
os.environ.setdefault('DJANGO_SETTINGS_MODULE', 'config.settings.dev')

application = get_asgi_application()
