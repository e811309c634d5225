"""Access guards and the ``{data, error}`` envelope for the JSON views."""
import functools
import json
import logging

from django.http import JsonResponse
from django.views.decorators.csrf import csrf_exempt

from .exceptions import AuctionError, NotAuthenticated, PermissionDenied, ValidationFailed
from .services.users import is_admin

logger = logging.getLogger(__name__)

SAFE_METHODS = ('GET', 'HEAD', 'OPTIONS')


def ok(data=None, status=200):
    return JsonResponse({'data': data, 'error': None}, status=status)


def fail(error):
    return JsonResponse({'data': None, 'error': error.as_dict()}, status=error.status)


def payload(request):
    if not request.body:
        return {}
    try:
        data = json.loads(request.body)
    except (ValueError, UnicodeDecodeError):
        raise ValidationFailed("Request body is not valid JSON")
    if not isinstance(data, dict):
        raise ValidationFailed("Request body must be a JSON object")
    return data


def _check(request, admin):
    if not request.user.is_authenticated:
        raise NotAuthenticated("Sign in to continue")
    if admin and not is_admin(request.user):
        logger.warning("Access denied: admin role required for %s", request.path)
        raise PermissionDenied("Admin role required")


def api(methods=('GET',), admin_writes=True, admin=False, public=False):
    """JSON endpoint: method check, auth/role guard, error envelope.

    Reads need a signed-in user; writes need an admin unless ``admin_writes``
    is off; ``admin`` guards every method, ``public`` none.
    """
    def decorator(view):
        @csrf_exempt
        @functools.wraps(view)
        def wrapper(request, *args, **kwargs):
            if request.method not in methods:
                return JsonResponse(
                    {'data': None, 'error': {'message': 'Method not allowed', 'code': 'method'}},
                    status=405,
                )
            try:
                if not public:
                    write = request.method not in SAFE_METHODS
                    _check(request, admin or (write and admin_writes))
                return view(request, *args, **kwargs)
            except AuctionError as e:
                logger.error("%s %s failed: %s", request.method, request.path, e.message)
                return fail(e)
        return wrapper
    return decorator
