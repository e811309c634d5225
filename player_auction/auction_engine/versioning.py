from django.conf import settings
from django.utils import timezone

FALLBACK_VERSION = '1.0.0'


def get_version():
    return settings.APP_VERSION or FALLBACK_VERSION


def get_version_with_prefix():
    return f"v{get_version()}"


def get_short_version():
    version = get_version()
    parts = version.split('.')
    return f"{parts[0]}.{parts[1]}" if len(parts) >= 2 else version


def get_short_version_with_prefix():
    return f"v{get_short_version()}"


def is_development():
    return settings.DEBUG


def get_build_info():
    return {
        'version': get_version(),
        'environment': 'development' if is_development() else 'production',
        'timestamp': timezone.now().isoformat(),
    }
