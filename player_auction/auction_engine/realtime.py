"""Per-table change versions.

Every write to a watched table bumps a counter row in ``change_counters``.
Clients (and ``AuctionStateService.sync``) compare counters to decide which
tables to re-fetch. The counters live in the database so every worker process
sees the same values, and a bump rolls back with the write that caused it.
Row saves and deletes are caught by signals; bulk ``update()`` calls do not
fire signals, so services call ``notify_change`` after them.
"""
import logging

from django.db.models import F
from django.db.models.signals import post_delete, post_save
from django.dispatch import receiver

from .models import AuctionConfig, AuctionHistory, ChangeCounter, Event, Player, Team, TeamPlayer

logger = logging.getLogger(__name__)

WATCHED = {
    Team: 'teams',
    Player: 'players',
    AuctionConfig: 'auction_config',
    AuctionHistory: 'auction_history',
    TeamPlayer: 'team_players',
    Event: 'events',
}
TABLES = tuple(WATCHED.values())


def notify_change(*tables):
    for table in tables:
        ChangeCounter.objects.get_or_create(table=table)
        ChangeCounter.objects.filter(table=table).update(version=F('version') + 1)
        logger.debug("change on %s", table)


def table_versions(tables=TABLES):
    found = dict(ChangeCounter.objects.filter(table__in=tables).values_list('table', 'version'))
    return {t: found.get(t, 0) for t in tables}


def changed_tables(seen, current=None):
    current = current if current is not None else table_versions()
    return [t for t, v in current.items() if seen.get(t) != v]


@receiver(post_save)
@receiver(post_delete)
def _row_changed(sender, **kwargs):
    table = WATCHED.get(sender)
    if table:
        notify_change(table)
