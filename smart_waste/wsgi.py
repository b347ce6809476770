"""
WSGI config for the Smart Waste project.
"""

import os

from django.core.wsgi import get_wsgi_application

os.environ.setdefault("DJANGO_SETTINGS_MODULE", "smart_waste.settings")

application = get_wsgi_application()
