# config/settings/development.py

from .base import *

DEBUG = True

ALLOWED_HOSTS = ['localhost', '127.0.0.1', '0.0.0.0']

# USE_SQLITE=1 runs without a PostgreSQL server
if env.bool('USE_SQLITE', default=False):
    DATABASES = {
        'default': {
            'ENGINE': 'django.db.backends.sqlite3',
            'NAME': BASE_DIR / 'db.sqlite3',
        }
    }

# Redis is optional locally: without USE_REDIS everything runs in one process
if not env.bool('USE_REDIS', default=False):
    CACHES = {
        'default': {
            'BACKEND': 'django.core.cache.backends.locmem.LocMemCache',
            'LOCATION': 'mini-trello-dev',
        }
    }
    CHANNEL_LAYERS = {
        'default': {
            'BACKEND': 'channels.layers.InMemoryChannelLayer',
        }
    }

# Verification codes and invitations are printed to the console
EMAIL_BACKEND = 'django.core.mail.backends.console.EmailBackend'

LOGGING['handlers']['console']['level'] = 'DEBUG'
LOGGING['loggers']['apps']['level'] = 'DEBUG'

SESSION_COOKIE_SECURE = False
CSRF_COOKIE_SECURE = False

# shell_plus (django-extensions)
SHELL_PLUS_IMPORTS = [
    'from apps.core.models import *',
    'from apps.core.permissions import BoardPermissions',
    'from apps.board.realtime import notify_board',
]
