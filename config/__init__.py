"""Django project package for the Shahzaib Autos storefront and dashboard API.

Holds the settings modules, URL routing, Celery application and the
WSGI/ASGI entry points.
"""

# Load the Celery app at startup so shared tasks get registered.
from .celery import app as celery_app  # noqa: F401
