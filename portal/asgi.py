"""
ASGI config for the patient portal.

Order matters: configure Django before importing any Django-dependent modules.
"""
import os

# 1) Configure settings before any Django import
os.environ.setdefault("DJANGO_SETTINGS_MODULE", "portal.settings")

# 2) Build the HTTP app (this runs django.setup())
from django.core.asgi import get_asgi_application  # noqa: E402

application = get_asgi_application()

# 3) Report database connectivity without blocking startup
from care.services.health import log_database_status  # noqa: E402

log_database_status()
