import logging

from django.utils import timezone
from django.utils.dateparse import parse_datetime

from ..exceptions import ValidationFailed
from ..models import Event
from ..serializers import event_dict
from .base import get_row, pick_fields, save_row

logger = logging.getLogger(__name__)

CREATE_FIELDS = ('name', 'description', 'event_type', 'start_date', 'end_date')
UPDATE_FIELDS = CREATE_FIELDS + ('status',)


def _dates(fields):
    for key in ('start_date', 'end_date'):
        value = fields.get(key)
        if isinstance(value, str):
            try:
                parsed = parse_datetime(value)
            except ValueError:
                parsed = None
            if parsed is None:
                raise ValidationFailed(f"{key} is not a valid date-time")
            if timezone.is_naive(parsed):
                parsed = timezone.make_aware(parsed)
            fields[key] = parsed
    return fields


class EventService:
    def get_events(self):
        return [event_dict(e) for e in Event.objects.order_by('start_date')]

    def get_event_by_id(self, event_id):
        return event_dict(get_row(Event.objects, event_id, "Event"))

    def create_event(self, data):
        event = save_row(Event(**_dates(pick_fields(data, CREATE_FIELDS))))
        logger.info("created event %s", event.name)
        return event_dict(event)

    def update_event(self, event_id, data):
        event = get_row(Event.objects, event_id, "Event")
        for field, value in _dates(pick_fields(data, UPDATE_FIELDS)).items():
            setattr(event, field, value)
        save_row(event)
        return event_dict(event)

    def delete_event(self, event_id):
        get_row(Event.objects, event_id, "Event").delete()

    def get_events_by_type(self, event_type):
        if event_type not in Event.EventType.values:
            raise ValidationFailed(f"Unknown event type {event_type!r}")
        return [event_dict(e) for e in Event.objects.filter(event_type=event_type).order_by('start_date')]

    def get_active_events(self):
        qs = Event.objects.filter(status=Event.Status.ACTIVE).order_by('start_date')
        return [event_dict(e) for e in qs]

    def get_upcoming_events(self, limit=5):
        qs = Event.objects.filter(start_date__gte=timezone.now()).order_by('start_date')[:limit]
        return [event_dict(e) for e in qs]
