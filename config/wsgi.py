"""WSGI entry point for the Shahzaib Autos API.

Used by gunicorn and `runserver`. Production deployments set
DJANGO_SETTINGS_MODULE=config.settings.prod explicitly.
"""

import os
from django.core.wsgi import get_wsgi_application  # type: ignore

os.environ.setdefault('DJANGO_SETTINGS_MODULE', 'config.settings.dev')

application = get_wsgi_application()
