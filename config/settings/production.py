# config/settings/production.py

from .base import *

DEBUG = False

# === REQUIRED ENVIRONMENT ===

for name in ('SECRET_KEY', 'ALLOWED_HOSTS', 'REDIS_URL'):
    if not env.str(name, default=''):
        raise ValueError(f"Environment variable {name} is required in production")

ALLOWED_HOSTS = env('ALLOWED_HOSTS')
CSRF_TRUSTED_ORIGINS = env.list('CSRF_TRUSTED_ORIGINS', default=[])

# Long-lived connections with health checks behind the ASGI server
DATABASES['default'].update({
    'CONN_MAX_AGE': 600,
    'CONN_HEALTH_CHECKS': True,
})
DATABASES['default'].setdefault('OPTIONS', {})['sslmode'] = env.str('DB_SSLMODE', default='require')

# === HTTPS ===

SECURE_PROXY_SSL_HEADER = ('HTTP_X_FORWARDED_PROTO', 'https')
SECURE_SSL_REDIRECT = env.bool('SECURE_SSL_REDIRECT', default=True)
SECURE_HSTS_SECONDS = env.int('SECURE_HSTS_SECONDS', default=31536000)
SECURE_HSTS_INCLUDE_SUBDOMAINS = True
SECURE_CONTENT_TYPE_NOSNIFF = True
SESSION_COOKIE_SECURE = True
CSRF_COOKIE_SECURE = True
X_FRAME_OPTIONS = 'DENY'

# === EMAIL (SMTP) ===

EMAIL_BACKEND = 'django.core.mail.backends.smtp.EmailBackend'
EMAIL_HOST = env.str('EMAIL_HOST', default='localhost')
EMAIL_PORT = env.int('EMAIL_PORT', default=587)
EMAIL_USE_TLS = env.bool('EMAIL_USE_TLS', default=True)
EMAIL_HOST_USER = env.str('EMAIL_HOST_USER', default='')
EMAIL_HOST_PASSWORD = env.str('EMAIL_HOST_PASSWORD', default='')

# Warnings and up from the apps, JSON error middleware included
LOGGING['handlers']['console']['level'] = 'WARNING'

MIDDLEWARE = ['django.middleware.gzip.GZipMiddleware'] + MIDDLEWARE
