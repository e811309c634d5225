import logging
from collections import Counter

from django.contrib.auth import get_user_model
from django.utils import dateformat, timezone

from ..exceptions import PermissionDenied, ValidationFailed
from ..models import Role, UserRole
from .base import get_row

logger = logging.getLogger(__name__)

ROLE_CONFIG = {
    Role.ADMIN: {'label': 'Admin', 'color': 'purple'},
    Role.VIEWER: {'label': 'Viewer', 'color': 'blue'},
}
DEFAULT_ROLE_CONFIG = {'label': 'User', 'color': 'gray'}

PROVIDER_LABELS = {
    'google': 'Google',
    'email': 'Email/Password',
    'github': 'GitHub',
}


def role_for(user):
    """Role of a signed-in user; None for anonymous visitors."""
    if user is None or not user.is_authenticated:
        return None
    try:
        return user.auction_role.role
    except UserRole.DoesNotExist:
        return Role.ADMIN if user.is_superuser else Role.USER


def is_admin(user):
    return role_for(user) == Role.ADMIN


class UsersService:
    def __init__(self):
        self.users = []

    def _row(self, user):
        try:
            entry = user.auction_role
        except UserRole.DoesNotExist:
            entry = None
        return {
            'user_id': user.pk,
            'email': user.email or user.username,
            'role': role_for(user),
            'created_at': user.date_joined,
            'last_sign_in_at': user.last_login,
            'provider': entry.provider if entry else 'email',
            'email_confirmed': user.is_active,
            'role_updated_at': entry.updated_at if entry else user.date_joined,
        }

    def get_users(self):
        User = get_user_model()
        users = User.objects.select_related('auction_role').order_by('date_joined', 'pk')
        self.users = [self._row(u) for u in users]
        return self.users

    def update_user_role(self, acting_user, user_id, new_role):
        if new_role not in Role.values:
            raise ValidationFailed(f"Unknown role {new_role!r}")
        User = get_user_model()
        target = get_row(User.objects, user_id, "User")
        if target.pk == acting_user.pk and role_for(target) == Role.ADMIN and new_role != Role.ADMIN:
            raise PermissionDenied("You cannot remove your own admin role")

        UserRole.objects.update_or_create(user=target, defaults={'role': new_role})
        logger.info("%s set role of %s to %s", acting_user, target, new_role)
        self.get_users()
        return True

    def get_user_stats(self):
        users = self.users or self.get_users()
        roles = Counter(u['role'] for u in users)
        providers = Counter(u['provider'] for u in users)
        return {
            'total': len(users),
            'admins': roles[Role.ADMIN],
            'regular_users': roles[Role.USER],
            'viewers': roles[Role.VIEWER],
            'google_users': providers['google'],
            'email_users': providers['email'],
        }

    @staticmethod
    def get_role_config(role):
        return dict(ROLE_CONFIG.get(role, DEFAULT_ROLE_CONFIG))

    @staticmethod
    def get_provider_label(provider):
        return PROVIDER_LABELS.get(provider, provider or 'Unknown')

    @staticmethod
    def format_date(value):
        if not value:
            return 'Never'
        if timezone.is_aware(value):
            value = timezone.localtime(value)
        return dateformat.format(value, 'M j, Y, h:i A')
