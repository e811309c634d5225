import logging
from collections import Counter

from django.core.exceptions import ValidationError
from django.db import transaction
from django.db.models import Q

from ..exceptions import ValidationFailed
from ..models import Player
from ..realtime import notify_change
from ..serializers import player_dict
from .base import get_row, pick_fields, save_row

logger = logging.getLogger(__name__)

CREATE_FIELDS = (
    'name', 'position', 'category', 'subcategory', 'base_price', 'image_url',
    'nationality', 'age', 'experience_years', 'stats',
)
UPDATE_FIELDS = CREATE_FIELDS + ('is_sold', 'is_active')
SORT_FIELDS = ('name', 'position', 'category', 'base_price', 'nationality', 'age', 'created_at')
NULLABLE = ('age', 'experience_years', 'stats')


class PlayersService:
    def __init__(self):
        self.players = []

    def get_players(self):
        self.players = [player_dict(p) for p in Player.objects.order_by('-created_at')]
        return self.players

    def get_player_by_id(self, player_id):
        return player_dict(get_row(Player.objects, player_id, "Player"))

    def create_player(self, data):
        fields = pick_fields(data, CREATE_FIELDS)
        fields = {k: v for k, v in fields.items() if v is not None or k in NULLABLE}
        if not fields.get('base_price'):
            fields.pop('base_price', None)
        player = save_row(Player(**fields))
        logger.info("created player %s (%s)", player.name, player.id)
        row = player_dict(player)
        self.players.insert(0, row)
        return row

    def update_player(self, player_id, data):
        player = get_row(Player.objects, player_id, "Player")
        for field, value in pick_fields(data, UPDATE_FIELDS).items():
            setattr(player, field, value)
        save_row(player)
        row = player_dict(player)
        self.players = [row if p['id'] == player.id else p for p in self.players]
        return row

    def delete_player(self, player_id):
        player = get_row(Player.objects, player_id, "Player")
        player.delete()
        logger.info("deleted player %s", player_id)
        self.players = [p for p in self.players if str(p['id']) != str(player_id)]

    def delete_players(self, player_ids):
        """Delete a selection of players; all or nothing. Returns the count."""
        with transaction.atomic():
            rows = {}
            for player_id in player_ids:
                player = get_row(Player.objects, player_id, "Player")
                rows[player.pk] = player
            for player in rows.values():
                player.delete()
        logger.info("deleted %s players", len(rows))
        gone = {str(pk) for pk in rows}
        self.players = [p for p in self.players if str(p['id']) not in gone]
        return len(rows)

    def toggle_player_status(self, player_id):
        player = get_row(Player.objects, player_id, "Player")
        return self.update_player(player.id, {'is_active': not player.is_active})

    def get_player_stats(self):
        rows = list(Player.objects.values('category', 'position', 'is_sold', 'is_active'))
        return {
            'total': len(rows),
            'active': sum(1 for r in rows if r['is_active']),
            'sold': sum(1 for r in rows if r['is_sold']),
            'unsold': sum(1 for r in rows if not r['is_sold']),
            'by_category': dict(Counter(r['category'] for r in rows)),
            'by_position': dict(Counter(r['position'] for r in rows)),
        }

    def get_players_by_category(self, category):
        return [player_dict(p) for p in Player.objects.filter(category=category).order_by('name')]

    def get_unsold_players(self):
        qs = Player.objects.filter(is_sold=False, is_active=True).order_by('name')
        return [player_dict(p) for p in qs]

    def search_players(self, term='', category='', position='', sort_field='name', direction='asc'):
        if sort_field not in SORT_FIELDS:
            raise ValidationFailed(f"Cannot sort players by {sort_field!r}")
        if direction not in ('asc', 'desc'):
            raise ValidationFailed("direction must be 'asc' or 'desc'")

        qs = Player.objects.all()
        if term:
            qs = qs.filter(
                Q(name__icontains=term) | Q(position__icontains=term)
                | Q(category__icontains=term) | Q(nationality__icontains=term)
            )
        if category:
            qs = qs.filter(category=category)
        if position:
            qs = qs.filter(position=position)
        order = sort_field if direction == 'asc' else f"-{sort_field}"
        return [player_dict(p) for p in qs.order_by(order, 'name')]

    def set_auction_status(self, player_ids, status):
        """Bulk status change; bulk updates skip signals so bump the version here."""
        try:
            updated = Player.objects.filter(pk__in=player_ids).update(auction_status=status)
        except (ValidationError, ValueError):
            raise ValidationFailed("player_ids must be a list of player ids")
        notify_change('players')
        return updated
