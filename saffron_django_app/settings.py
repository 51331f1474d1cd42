"""
Django settings for the saffron_django_app project.

The console keeps no database: everything it shows comes from the
authorization service or from the submitted text.  Connection settings for
that service are read by ``saffron_platform.config`` from the environment.
"""
import os

from django.core.management.utils import get_random_secret_key

SECRET_KEY = os.environ.get('DJANGO_SECRET_KEY') or get_random_secret_key()

DEBUG = os.environ.get('DJANGO_DEBUG', '').strip().lower() in ('1', 'true', 'yes', 'on')

ALLOWED_HOSTS = [
    host.strip()
    for host in os.environ.get('DJANGO_ALLOWED_HOSTS', 'localhost,127.0.0.1').split(',')
    if host.strip()
]

INSTALLED_APPS = [
    'django.contrib.staticfiles',
]

MIDDLEWARE = [
    'django.middleware.security.SecurityMiddleware',
    'django.middleware.common.CommonMiddleware',
]

ROOT_URLCONF = 'saffron_django_app.urls'

WSGI_APPLICATION = 'saffron_django_app.wsgi.application'

DATABASES = {}

USE_TZ = True
TIME_ZONE = 'UTC'

STATIC_URL = 'static/'

LOGGING = {
    'version': 1,
    'disable_existing_loggers': False,
    'formatters': {
        'console': {
            'format': '%(asctime)s %(levelname)s %(name)s: %(message)s',
        },
    },
    'handlers': {
        'console': {
            'class': 'logging.StreamHandler',
            'formatter': 'console',
        },
    },
    'loggers': {
        'saffron_platform': {
            'handlers': ['console'],
            'level': os.environ.get('SAFFRON_LOG_LEVEL', 'INFO'),
        },
        'saffron_django_app': {
            'handlers': ['console'],
            'level': os.environ.get('SAFFRON_LOG_LEVEL', 'INFO'),
        },
    },
}
