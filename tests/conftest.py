import pytest
from django.test import Client

from auction_engine.models import AuctionConfig, Player, Role, Team, UserRole


@pytest.fixture
def team(db):
    return Team.objects.create(name="Chennai", short_name="CSK", budget_cap=1_000_000, max_players=3)


@pytest.fixture
def other_team(db):
    return Team.objects.create(name="Mumbai", short_name="MI", budget_cap=500_000, max_players=2)


@pytest.fixture
def players(db):
    rows = [
        ("Asha", "Batsman", "Top Order", "India"),
        ("Ben", "Bowler", "Fast Bowler", "England"),
        ("Chris", "All-Rounder", "Middle Order", "Australia"),
        ("Dev", "Batsman", "Middle Order", "India"),
    ]
    return [
        Player.objects.create(
            name=name, category=category, position=position, nationality=nation, base_price=100_000
        )
        for name, category, position, nation in rows
    ]


@pytest.fixture
def config(db):
    return AuctionConfig.objects.create(name="Season 1")


def _user(django_user_model, email, role):
    user = django_user_model.objects.create_user(username=email, email=email, password="secret123")
    UserRole.objects.create(user=user, role=role)
    return user


@pytest.fixture
def admin(django_user_model):
    return _user(django_user_model, "admin@example.com", Role.ADMIN)


@pytest.fixture
def viewer(django_user_model):
    return _user(django_user_model, "viewer@example.com", Role.VIEWER)


@pytest.fixture
def admin_api(admin):
    client = Client()
    client.force_login(admin)
    return client


@pytest.fixture
def viewer_api(viewer):
    client = Client()
    client.force_login(viewer)
    return client
