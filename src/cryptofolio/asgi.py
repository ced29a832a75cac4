"""
ASGI entrypoint. Configures Django and then exposes the HTTP application.
"""

import os

from django.core.asgi import get_asgi_application

os.environ.setdefault("DJANGO_SETTINGS_MODULE", "cryptofolio.settings")

application = get_asgi_application()
