# config/wsgi.py

import os
from django.core.wsgi import get_wsgi_application

# HTTP-only deployments; WebSockets need config.asgi
os.environ.setdefault('DJANGO_SETTINGS_MODULE', 'config.settings.production')

application = get_wsgi_application()
