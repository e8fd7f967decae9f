# config/settings/base.py

import dj_database_url
import environ
from pathlib import Path

BASE_DIR = Path(__file__).resolve().parent.parent.parent

# Every environment variable the project reads, with its type and default
env = environ.Env(
    DEBUG=(bool, False),
    SECRET_KEY=(str, 'django-insecure-CHANGE-ME-IN-PRODUCTION'),
    ALLOWED_HOSTS=(list, []),
    DB_NAME=(str, 'mini_trello'),
    DB_USER=(str, 'mini_trello'),
    DB_PASSWORD=(str, 'mini_trello'),
    DB_HOST=(str, 'localhost'),
    DB_PORT=(str, '5432'),
    REDIS_URL=(str, 'redis://localhost:6379/0'),
    LOG_DIR=(str, str(BASE_DIR / 'logs')),
    FRONTEND_URL=(str, 'http://localhost:5173'),
    DEFAULT_FROM_EMAIL=(str, 'Mini Trello <no-reply@mini-trello.local>'),
    VERIFICATION_CODE_TTL_MINUTES=(int, 10),
    INVITATION_TTL_DAYS=(int, 7),
    REALTIME_REQUIRE_MEMBERSHIP=(bool, True),
)

environ.Env.read_env(BASE_DIR / '.env')

SECRET_KEY = env('SECRET_KEY')
DEBUG = env('DEBUG')
ALLOWED_HOSTS = env('ALLOWED_HOSTS')

# === APPLICATIONS ===

INSTALLED_APPS = [
    'django.contrib.admin',
    'django.contrib.auth',
    'django.contrib.contenttypes',
    'django.contrib.sessions',
    'django.contrib.messages',
    'django.contrib.staticfiles',

    'channels',
    'django_extensions',

    'apps.core',
    'apps.board',
]

MIDDLEWARE = [
    'django.middleware.security.SecurityMiddleware',
    'whitenoise.middleware.WhiteNoiseMiddleware',
    'django.contrib.sessions.middleware.SessionMiddleware',
    'django.middleware.common.CommonMiddleware',
    'django.middleware.csrf.CsrfViewMiddleware',
    'django.contrib.auth.middleware.AuthenticationMiddleware',
    'django.contrib.messages.middleware.MessageMiddleware',
    'django.middleware.clickjacking.XFrameOptionsMiddleware',
    # JSON errors for /api/
    'apps.core.middleware.ApiErrorMiddleware',
]

ROOT_URLCONF = 'config.urls'
WSGI_APPLICATION = 'config.wsgi.application'
ASGI_APPLICATION = 'config.asgi.application'

TEMPLATES = [
    {
        'BACKEND': 'django.template.backends.django.DjangoTemplates',
        'APP_DIRS': True,
        'OPTIONS': {
            'context_processors': [
                'django.template.context_processors.request',
                'django.contrib.auth.context_processors.auth',
                'django.contrib.messages.context_processors.messages',
            ],
        },
    },
]

# === DATABASE ===

# DATABASE_URL wins; otherwise the URL is assembled from the DB_* variables
DATABASES = {
    'default': dj_database_url.config(
        default='postgres://{user}:{password}@{host}:{port}/{name}'.format(
            user=env('DB_USER'),
            password=env('DB_PASSWORD'),
            host=env('DB_HOST'),
            port=env('DB_PORT'),
            name=env('DB_NAME'),
        ),
        conn_max_age=60,
    )
}

DEFAULT_AUTO_FIELD = 'django.db.models.BigAutoField'

AUTH_USER_MODEL = 'core.User'

# === REDIS: CACHE, SESSIONS, CHANNEL LAYER ===

REDIS_URL = env('REDIS_URL')

CACHES = {
    'default': {
        'BACKEND': 'django_redis.cache.RedisCache',
        'LOCATION': REDIS_URL,
        'OPTIONS': {
            'CLIENT_CLASS': 'django_redis.client.DefaultClient',
        }
    }
}

# Board rooms are Channels groups; Redis shares them between workers
CHANNEL_LAYERS = {
    'default': {
        'BACKEND': 'channels_redis.core.RedisChannelLayer',
        'CONFIG': {
            'hosts': [REDIS_URL],
        },
    },
}

SESSION_ENGINE = 'django.contrib.sessions.backends.cache'
SESSION_CACHE_ALIAS = 'default'
SESSION_COOKIE_AGE = 14 * 24 * 3600
SESSION_SAVE_EVERY_REQUEST = True

# Regular accounts have no password; these only apply to staff using the admin
AUTH_PASSWORD_VALIDATORS = [
    {'NAME': 'django.contrib.auth.password_validation.MinimumLengthValidator'},
    {'NAME': 'django.contrib.auth.password_validation.CommonPasswordValidator'},
]

# === I18N ===

LANGUAGE_CODE = 'en-us'
TIME_ZONE = 'UTC'
USE_I18N = False
USE_TZ = True

# === STATIC FILES (admin) ===

STATIC_URL = '/static/'
STATIC_ROOT = BASE_DIR / 'staticfiles'

STORAGES = {
    'default': {
        'BACKEND': 'django.core.files.storage.FileSystemStorage',
    },
    'staticfiles': {
        'BACKEND': 'whitenoise.storage.CompressedManifestStaticFilesStorage',
    },
}

# JSON bodies only
DATA_UPLOAD_MAX_MEMORY_SIZE = 1024 * 1024

# === EMAIL ===

EMAIL_BACKEND = 'django.core.mail.backends.console.EmailBackend'
DEFAULT_FROM_EMAIL = env('DEFAULT_FROM_EMAIL')

# === LOGGING ===

LOG_DIR = Path(env('LOG_DIR'))
LOG_DIR.mkdir(parents=True, exist_ok=True)

LOGGING = {
    'version': 1,
    'disable_existing_loggers': False,
    'formatters': {
        'verbose': {
            'format': '{asctime} {levelname} {name} {message}',
            'style': '{',
        },
        'simple': {
            'format': '{levelname} {name}: {message}',
            'style': '{',
        },
    },
    'handlers': {
        'console': {
            'level': 'INFO',
            'class': 'logging.StreamHandler',
            'formatter': 'simple',
        },
        'file': {
            'level': 'INFO',
            'class': 'logging.handlers.RotatingFileHandler',
            'filename': LOG_DIR / 'mini_trello.log',
            'maxBytes': 5 * 1024 * 1024,
            'backupCount': 3,
            'formatter': 'verbose',
        },
    },
    'root': {
        'handlers': ['console'],
        'level': 'WARNING',
    },
    'loggers': {
        'django': {
            'handlers': ['console', 'file'],
            'level': 'INFO',
            'propagate': False,
        },
        # apps.core.* and apps.board.*
        'apps': {
            'handlers': ['console', 'file'],
            'level': 'INFO',
            'propagate': False,
        },
    },
}

# === MINI TRELLO ===

MINITRELLO_VERIFICATION_CODE_TTL_MINUTES = env('VERIFICATION_CODE_TTL_MINUTES')
MINITRELLO_INVITATION_TTL_DAYS = env('INVITATION_TTL_DAYS')

# Off: any connection may join any room and relay events into it
MINITRELLO_REALTIME_REQUIRE_MEMBERSHIP = env('REALTIME_REQUIRE_MEMBERSHIP')

# Links in outgoing emails
MINITRELLO_FRONTEND_URL = env('FRONTEND_URL')

MINITRELLO_USERS_LIST_LIMIT = 50
MINITRELLO_USERS_SEARCH_LIMIT = 10
