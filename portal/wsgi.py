"""
WSGI config for the patient portal.

It exposes the WSGI callable as a module-level variable named ``application``.
The database is probed once on startup; a failure is logged and the
server keeps serving requests.
"""
import os

from django.core.wsgi import get_wsgi_application  # type: ignore

# Set the default settings module for the 'django' program.
os.environ.setdefault('DJANGO_SETTINGS_MODULE', 'portal.settings')

# Obtain the WSGI application for use by the server
application = get_wsgi_application()

from care.services.health import log_database_status  # noqa: E402

log_database_status()
