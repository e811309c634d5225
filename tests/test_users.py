from datetime import datetime

import pytest

from auction_engine.exceptions import NotFound, PermissionDenied, ValidationFailed
from auction_engine.models import Role, UserRole
from auction_engine.services import UsersService
from auction_engine.services.users import is_admin, role_for


@pytest.mark.django_db
def test_role_lookup(django_user_model, admin, viewer):
    plain = django_user_model.objects.create_user(username="p@example.com", password="x")
    boss = django_user_model.objects.create_superuser(username="root@example.com", password="x")

    assert role_for(admin) == Role.ADMIN
    assert role_for(viewer) == Role.VIEWER
    assert role_for(plain) == Role.USER
    assert role_for(boss) == Role.ADMIN
    assert role_for(None) is None
    assert is_admin(admin) and not is_admin(viewer)


def test_get_users(admin, viewer):
    users = UsersService().get_users()
    assert [u["email"] for u in users] == ["admin@example.com", "viewer@example.com"]
    assert users[0]["role"] == Role.ADMIN
    assert users[0]["provider"] == "email"
    assert users[0]["last_sign_in_at"] is None


def test_update_user_role(admin, viewer):
    service = UsersService()
    assert service.update_user_role(admin, viewer.pk, Role.ADMIN) is True
    assert UserRole.objects.get(user=viewer).role == Role.ADMIN
    assert {u["role"] for u in service.users} == {Role.ADMIN}


def test_admin_cannot_demote_self(admin):
    with pytest.raises(PermissionDenied):
        UsersService().update_user_role(admin, admin.pk, Role.VIEWER)
    assert UserRole.objects.get(user=admin).role == Role.ADMIN


def test_update_user_role_validates(admin):
    service = UsersService()
    with pytest.raises(ValidationFailed):
        service.update_user_role(admin, admin.pk, "owner")
    with pytest.raises(NotFound):
        service.update_user_role(admin, 9999, Role.USER)


def test_user_stats(admin, viewer):
    stats = UsersService().get_user_stats()
    assert stats == {
        "total": 2,
        "admins": 1,
        "regular_users": 0,
        "viewers": 1,
        "google_users": 0,
        "email_users": 2,
    }


def test_display_helpers():
    assert UsersService.get_role_config("admin")["label"] == "Admin"
    assert UsersService.get_role_config("viewer")["label"] == "Viewer"
    assert UsersService.get_role_config("anything")["label"] == "User"
    assert UsersService.get_provider_label("google") == "Google"
    assert UsersService.get_provider_label("email") == "Email/Password"
    assert UsersService.get_provider_label("") == "Unknown"
    assert UsersService.get_provider_label("gitlab") == "gitlab"
    assert UsersService.format_date(None) == "Never"
    assert UsersService.format_date(datetime(2026, 1, 5, 14, 30)) == "Jan 5, 2026, 02:30 PM"
