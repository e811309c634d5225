from datetime import date, datetime
from types import SimpleNamespace

from auction_engine import analytics


def _team(**overrides):
    team = {
        "id": "t1", "name": "Chennai", "budget_cap": 1000, "budget_spent": 0,
        "players_count": 0, "max_players": 10, "is_active": True,
    }
    team.update(overrides)
    return team


def test_team_card_levels():
    card = analytics.team_card(_team(budget_spent=900, players_count=10))
    assert card["budget_percentage"] == 90
    assert card["budget_level"] == "high"
    assert card["player_level"] == "full"
    assert card["status_level"] == "high"

    card = analytics.team_card(_team(budget_spent=600, players_count=9))
    assert card["budget_level"] == "medium"
    assert card["player_level"] == "high"

    card = analytics.team_card(_team(budget_spent=500, is_active=False))
    assert card["budget_level"] == "low"
    assert card["player_level"] == "ok"
    assert card["status_level"] == "inactive"


def test_team_card_counts_roster_before_stored_count():
    card = analytics.team_card(_team(players_count=1, players=[{}, {}, {}]))
    assert card["player_count"] == 3
    assert card["player_percentage"] == 30


def test_team_card_zero_caps():
    card = analytics.team_card(_team(budget_cap=0, max_players=0))
    assert card["budget_percentage"] == 0
    assert card["player_percentage"] == 0


def _entry(name, price, status="SOLD", team="t1", day=1):
    return {
        "player": {"name": name},
        "final_price": price,
        "status": status,
        "winning_team_id": team,
        "auction_date": date(2026, 1, day),
        "sold_at": datetime(2026, 1, day, 12),
    }


def test_history_summary():
    history = [
        _entry("Asha", 300),
        _entry("Ben", 100),
        _entry("Chris", None, status="UNSOLD", team=None),
    ]
    summary = analytics.history_summary(history)
    assert summary == {
        "total_transactions": 3,
        "sold_players": 2,
        "unsold_players": 1,
        "total_revenue": 400,
        "average_price": 200,
    }
    assert analytics.history_summary([])["average_price"] == 0


def test_sort_history():
    history = [_entry("ben", 100, day=1), _entry("Asha", 300, day=3), _entry("Chris", 200, day=2)]
    assert [h["player"]["name"] for h in analytics.sort_history(history, "name")] == ["Asha", "ben", "Chris"]
    assert [h["final_price"] for h in analytics.sort_history(history, "price")] == [300, 200, 100]
    assert [h["player"]["name"] for h in analytics.sort_history(history)] == ["Asha", "Chris", "ben"]


def test_welcome_message():
    assert analytics.welcome_message(SimpleNamespace(email="sam@club.org")) == "Welcome back, sam!"
    assert analytics.welcome_message(SimpleNamespace(email="")) == "Welcome to your dashboard!"


def test_dashboard_summary(admin, config, team, players):
    from auction_engine.services import AuctionStateService

    state = AuctionStateService().load_all_data()
    state.get_next_player()
    state.sell_player(team.id, 100_000)

    summary = analytics.dashboard_summary(admin)
    assert summary["welcome_message"] == "Welcome back, admin!"
    assert summary["configs"] == 1
    assert summary["active_auctions"] == 0
    assert summary["teams"] == 1
    assert summary["players"] == 4
    assert summary["sales"] == 1
    assert summary["progress_percentage"] == 25
