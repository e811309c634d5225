import logging

from django.db import transaction
from django.utils import timezone
from django.utils.dateparse import parse_date, parse_duration

from ..exceptions import NotFound, ValidationFailed
from ..models import (
    AuctionConfig, AuctionHistory, AuctionStatus, ConfigStatus, Player, Team, TeamPlayer,
)
from ..realtime import notify_change
from ..serializers import config_dict, history_dict
from .base import get_row, pick_fields, save_row

logger = logging.getLogger(__name__)

CONFIG_CREATE_FIELDS = (
    'name', 'description', 'budget_cap', 'max_players_per_team', 'min_players_per_team',
)
CONFIG_UPDATE_FIELDS = CONFIG_CREATE_FIELDS + (
    'status', 'current_player_id', 'current_player_position', 'total_players',
)
HISTORY_FIELDS = (
    'player_id', 'winning_team_id', 'final_price', 'auction_date', 'auction_round',
    'bidding_duration', 'notes', 'status',
)
# players in these states go back into the queue on reset; INACTIVE stays out
RESETTABLE = (AuctionStatus.CURRENT, AuctionStatus.SOLD, AuctionStatus.UNSOLD, AuctionStatus.SKIPPED)


def active_config():
    """The configuration in use: the most recently created row, or None."""
    return AuctionConfig.objects.order_by('-created_at').first()


def _require_config():
    config = active_config()
    if config is None:
        raise NotFound("No auction config found")
    return config


class AuctionService:
    # --- configuration ---
    def get_auction_config(self):
        return config_dict(active_config())

    def create_auction_config(self, data):
        fields = {k: v for k, v in pick_fields(data, CONFIG_CREATE_FIELDS).items() if v is not None}
        config = save_row(AuctionConfig(**fields))
        logger.info("created auction config %s", config.name)
        return config_dict(config)

    def update_auction_config(self, config_id, data):
        config = get_row(AuctionConfig.objects, config_id, "Auction config")
        fields = pick_fields(data, CONFIG_UPDATE_FIELDS)
        if fields.get('current_player_id'):
            get_row(Player.objects, fields['current_player_id'], "Player")
        for field, value in fields.items():
            setattr(config, field, value)
        save_row(config)
        return config_dict(config)

    def delete_auction_config(self, config_id):
        get_row(AuctionConfig.objects, config_id, "Auction config").delete()
        logger.info("deleted auction config %s", config_id)

    def get_current_auction(self):
        config = (
            AuctionConfig.objects
            .filter(status__in=[ConfigStatus.ACTIVE, ConfigStatus.DRAFT])
            .order_by('-created_at')
            .first()
        )
        return config_dict(config)

    # --- history ---
    def get_auction_history(self):
        rows = (
            AuctionHistory.objects
            .select_related('player', 'winning_team')
            .order_by('-sold_at')
        )
        return [history_dict(h) for h in rows]

    def add_bid_to_history(self, data):
        fields = pick_fields(data, HISTORY_FIELDS)
        player = get_row(Player.objects, fields.pop('player_id', None), "Player")
        team = None
        if fields.get('winning_team_id'):
            team = get_row(Team.objects, fields['winning_team_id'], "Team")
        fields.pop('winning_team_id', None)

        auction_date = fields.pop('auction_date', None) or timezone.localdate()
        if isinstance(auction_date, str):
            try:
                auction_date = parse_date(auction_date)
            except ValueError:
                # well formed but impossible, e.g. month 13
                auction_date = None
            if auction_date is None:
                raise ValidationFailed("auction_date is not a valid date")
        duration = fields.pop('bidding_duration', None)
        if isinstance(duration, str):
            try:
                duration = parse_duration(duration)
            except ValueError:
                duration = None
            if duration is None:
                raise ValidationFailed("bidding_duration is not a valid duration")
        if fields.get('notes') is None:
            fields.pop('notes', None)

        entry = save_row(AuctionHistory(
            player=player,
            winning_team=team,
            auction_date=auction_date,
            bidding_duration=duration,
            **fields
        ))
        logger.info("history: %s %s", player.name, entry.status)
        return history_dict(entry)

    def clear_auction_history(self):
        deleted, _ = AuctionHistory.objects.all().delete()
        logger.info("cleared %s history rows", deleted)

    # --- lifecycle ---
    def start_auction(self):
        config = _require_config()
        config.status = ConfigStatus.ACTIVE
        config.started_at = timezone.now()
        config.save()
        logger.info("auction %s started", config.name)
        return config_dict(config)

    def end_auction(self):
        config = _require_config()
        config.status = ConfigStatus.COMPLETED
        config.completed_at = timezone.now()
        config.save()
        logger.info("auction %s completed", config.name)
        return config_dict(config)

    def reset_auction(self):
        with transaction.atomic():
            config = _require_config()
            config.status = ConfigStatus.DRAFT
            config.current_player = None
            config.current_player_position = 0
            config.started_at = None
            config.completed_at = None
            config.save()

            Player.objects.filter(auction_status__in=RESETTABLE).update(
                auction_status=AuctionStatus.PENDING
            )
            Player.objects.update(is_sold=False)
            AuctionHistory.objects.all().delete()
            TeamPlayer.objects.all().delete()
            Team.objects.update(budget_spent=0, players_count=0)

        notify_change('players', 'teams')
        logger.warning("auction %s reset", config.name)
        return config_dict(config)
