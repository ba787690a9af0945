import django
from django.conf import settings


if not settings.configured:
    settings.configure(
        DEBUG=False,
        SECRET_KEY='regex-visualizer-tests',
        ALLOWED_HOSTS=['testserver', 'localhost'],
        ROOT_URLCONF='regex_visualizer.urls',
        INSTALLED_APPS=['regex_visualizer'],
        MIDDLEWARE=[],
        DATABASES={},
        USE_TZ=True,
        LOGGING={
            'version': 1,
            'disable_existing_loggers': False,
            'handlers': {'null': {'class': 'logging.NullHandler'}},
            'loggers': {'regex_visualizer': {'handlers': ['null'], 'propagate': False}},
        },
    )
    django.setup()
