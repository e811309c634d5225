from datetime import timedelta

import pytest
from django.utils import timezone

from auction_engine.exceptions import NotFound, ValidationFailed
from auction_engine.models import Event
from auction_engine.services import EventService


def _event(name, event_type="auction", days=1, status="scheduled"):
    start = timezone.now() + timedelta(days=days)
    return Event.objects.create(
        name=name, event_type=event_type, status=status,
        start_date=start, end_date=start + timedelta(hours=4),
    )


@pytest.mark.django_db
def test_create_event_parses_dates():
    row = EventService().create_event({
        "name": "Mega Auction",
        "event_type": "auction",
        "start_date": "2026-12-01T10:00:00",
        "end_date": "2026-12-01T18:00:00",
    })
    assert row["status"] == Event.Status.SCHEDULED
    assert timezone.is_aware(row["start_date"])
    assert row["start_date"].hour == 10


@pytest.mark.django_db
def test_create_event_validates():
    service = EventService()
    with pytest.raises(ValidationFailed):
        service.create_event({"name": "x", "event_type": "auction", "start_date": "soon", "end_date": "later"})
    with pytest.raises(ValidationFailed):
        service.create_event({
            "name": "x", "event_type": "party",
            "start_date": "2026-12-01T10:00:00", "end_date": "2026-12-01T11:00:00",
        })


@pytest.mark.django_db
def test_update_and_delete_event():
    event = _event("Trade window", event_type="trade")
    service = EventService()
    row = service.update_event(event.id, {"status": "active", "description": "Open"})
    assert row["status"] == "active"
    assert row["description"] == "Open"

    service.delete_event(event.id)
    with pytest.raises(NotFound):
        service.get_event_by_id(event.id)


@pytest.mark.django_db
def test_event_filters():
    _event("Later", days=10)
    _event("Soon", event_type="draft", days=2, status="active")
    _event("Past", days=-3, status="completed")
    service = EventService()

    assert [e["name"] for e in service.get_events()] == ["Past", "Soon", "Later"]
    assert [e["name"] for e in service.get_events_by_type("draft")] == ["Soon"]
    assert [e["name"] for e in service.get_active_events()] == ["Soon"]
    assert [e["name"] for e in service.get_upcoming_events()] == ["Soon", "Later"]
    assert [e["name"] for e in service.get_upcoming_events(limit=1)] == ["Soon"]
    with pytest.raises(ValidationFailed):
        service.get_events_by_type("party")


@pytest.mark.django_db
def test_impossible_dates_are_rejected():
    with pytest.raises(ValidationFailed):
        EventService().create_event({
            "name": "x", "event_type": "auction",
            "start_date": "2024-13-45T10:00:00", "end_date": "2024-12-01T11:00:00",
        })
