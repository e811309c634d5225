"""The auction aggregator.

``AuctionStateService`` mirrors the five auction tables in memory, derives the
view models the control screen needs (team rosters, player queue, progress)
and drives the live loop: pick a player, sell or pass, move on. Every mutation
hits the database first and only then patches the mirrors, so a failed call
leaves the mirrors as they were.
"""
import logging

from django.db import transaction
from django.db.models import F

from ..exceptions import NotFound, ValidationFailed
from ..models import (
    AuctionConfig, AuctionHistory, AuctionStatus, HistoryStatus, Player, Team, TeamPlayer,
)
from ..realtime import changed_tables, table_versions
from ..serializers import config_dict, history_dict, player_dict, team_dict, team_player_dict
from .auction import AuctionService, active_config
from .base import get_row
from .players import PlayersService
from .team_players import TeamPlayersService

logger = logging.getLogger(__name__)

STATUS_ORDER = {
    AuctionStatus.CURRENT: 0,
    AuctionStatus.PENDING: 1,
    AuctionStatus.SOLD: 2,
    AuctionStatus.UNSOLD: 3,
    AuctionStatus.SKIPPED: 4,
    AuctionStatus.INACTIVE: 5,
}
# statuses that take a player off the block
CLOSING = (AuctionStatus.SOLD, AuctionStatus.UNSOLD, AuctionStatus.SKIPPED)


def percentage(part, whole):
    """Whole-number percentage, halves rounded up; 0 for an empty whole."""
    if whole <= 0:
        return 0
    return (part * 200 + whole) // (whole * 2)


class AuctionStateService:
    def __init__(self, auction=None, players=None, team_players=None):
        self.auction = auction or AuctionService()
        self.players_service = players or PlayersService()
        self.team_players_service = team_players or TeamPlayersService()

        self.auction_config = None
        self.current_player = None
        self.teams = []
        self.players = []
        self.auction_history = []
        self.team_players = []
        self.error = None
        self.versions = {}

    # --- derived view models ---
    @property
    def teams_with_players(self):
        out = []
        for team in self.teams:
            players = [
                {
                    **tp['player'],
                    'purchase_price': tp['purchase_price'],
                    'purchased_at': tp['purchased_at'],
                    'team_player_id': tp['id'],
                }
                for tp in self.team_players
                if tp['team_id'] == team['id'] and tp.get('player')
            ]
            out.append({**team, 'players': players})
        return out

    @property
    def player_queue(self):
        queued = [p for p in self.players if p['auction_status'] != AuctionStatus.INACTIVE]
        # sorted() is stable, so name order from the load survives within a status
        return sorted(queued, key=lambda p: STATUS_ORDER.get(p['auction_status'], 6))

    @property
    def available_players(self):
        return [
            p for p in self.players
            if p['auction_status'] == AuctionStatus.PENDING and p['is_active']
        ]

    @property
    def sold_players(self):
        return [h for h in self.auction_history if h['status'] == HistoryStatus.SOLD]

    @property
    def total_players(self):
        return len(self.player_queue)

    @property
    def remaining_players(self):
        return sum(1 for p in self.players if p['auction_status'] == AuctionStatus.PENDING)

    @property
    def progress_percentage(self):
        return percentage(len(self.sold_players), self.total_players)

    @property
    def available_teams(self):
        price = self.current_player['base_price'] if self.current_player else 0
        return [
            t for t in self.teams
            if t['budget_remaining'] >= price and t['players_count'] < t['max_players']
        ]

    # --- loading ---
    def load_auction_config(self):
        self.auction_config = config_dict(active_config())
        return self.auction_config

    def load_teams(self):
        self.teams = [team_dict(t) for t in Team.objects.filter(is_active=True).order_by('name')]
        return self.teams

    def load_players(self):
        self.players = [
            player_dict(p) for p in Player.objects.filter(is_active=True).order_by('name')
        ]
        self.load_current_player()
        return self.players

    def load_auction_history(self):
        rows = AuctionHistory.objects.select_related('player', 'winning_team').order_by('-sold_at')
        self.auction_history = [history_dict(h) for h in rows]
        return self.auction_history

    def load_team_players(self):
        rows = TeamPlayer.objects.select_related('team', 'player').order_by('-purchased_at')
        self.team_players = [team_player_dict(tp) for tp in rows]
        return self.team_players

    def load_current_player(self):
        self.current_player = next(
            (p for p in self.players if p['auction_status'] == AuctionStatus.CURRENT), None
        )
        return self.current_player

    LOADERS = {
        'auction_config': 'load_auction_config',
        'teams': 'load_teams',
        'players': 'load_players',
        'auction_history': 'load_auction_history',
        'team_players': 'load_team_players',
    }

    def load_all_data(self):
        self.error = None
        # read versions first so a write racing the load shows up on the next sync
        versions = table_versions(tuple(self.LOADERS))
        try:
            for loader in self.LOADERS.values():
                getattr(self, loader)()
        except Exception as e:
            self.error = str(e)
            logger.exception("Error loading auction data")
            raise
        self.versions = versions
        return self

    def sync(self):
        """Re-fetch the tables that changed since the last load; returns their names."""
        current = table_versions(tuple(self.LOADERS))
        stale = changed_tables(self.versions, current)
        for table in stale:
            getattr(self, self.LOADERS[table])()
        self.versions = current
        if stale:
            logger.debug("synced %s", ', '.join(stale))
        return stale

    # --- status changes ---
    def _persist_status(self, player_id, status):
        if status not in AuctionStatus.values:
            raise ValidationFailed(f"Unknown auction status {status!r}")
        with transaction.atomic():
            player = get_row(Player.objects.select_for_update(), player_id, "Player")
            demoted = []
            if status == AuctionStatus.CURRENT:
                others = Player.objects.filter(auction_status=AuctionStatus.CURRENT).exclude(pk=player.pk)
                demoted = list(others.values_list('pk', flat=True))
                others.update(auction_status=AuctionStatus.PENDING)

            player.auction_status = status
            player.is_sold = status == AuctionStatus.SOLD
            player.save(update_fields=['auction_status', 'is_sold', 'updated_at'])

            config = active_config()
            if config is not None:
                if status == AuctionStatus.CURRENT:
                    config.current_player = player
                    config.current_player_position = F('current_player_position') + 1
                    config.save()
                    config.refresh_from_db()
                elif config.current_player_id == player.pk:
                    config.current_player = None
                    config.save()
        return player, demoted, config

    def _apply_status(self, player, demoted, config):
        status = player.auction_status
        patched = []
        for p in self.players:
            if p['id'] == player.pk:
                p = {**p, 'auction_status': status, 'is_sold': player.is_sold}
            elif p['id'] in demoted:
                p = {**p, 'auction_status': AuctionStatus.PENDING}
            patched.append(p)
        self.players = patched
        if config is not None:
            self.auction_config = config_dict(config)

        if status == AuctionStatus.CURRENT:
            self.current_player = next((p for p in self.players if p['id'] == player.pk), None)
        elif status in CLOSING:
            self.load_current_player()

    def update_player_auction_status(self, player_id, status):
        player, demoted, config = self._persist_status(player_id, status)
        self._apply_status(player, demoted, config)
        logger.info("%s -> %s", player.name, status)
        return player_dict(player)

    # --- table writes with mirror updates ---
    def add_bid_to_history(self, data):
        entry = self.auction.add_bid_to_history(data)
        self.auction_history = [entry] + self.auction_history
        return entry

    def assign_player_to_team(self, data):
        assignment = self.team_players_service.assign_player_to_team(data)
        # budget and count moved server side
        self.load_teams()
        self.team_players = [assignment] + self.team_players
        self.players = [
            {**p, 'auction_status': AuctionStatus.SOLD, 'is_sold': True}
            if p['id'] == assignment['player_id'] else p
            for p in self.players
        ]
        return assignment

    def _set_many(self, player_ids, status):
        ids = set(str(i) for i in player_ids)
        self.players_service.set_auction_status(list(ids), status)
        self.players = [
            {**p, 'auction_status': status} if str(p['id']) in ids else p
            for p in self.players
        ]
        self.load_current_player()

    def add_players_to_auction(self, player_ids):
        self._set_many(player_ids, AuctionStatus.PENDING)

    def remove_players_from_auction(self, player_ids):
        self._set_many(player_ids, AuctionStatus.INACTIVE)

    # --- the live loop ---
    def initialize_auction(self):
        """Queue every active, unsold player; returns how many were queued."""
        ids = list(
            Player.objects.filter(is_active=True, is_sold=False)
            .exclude(auction_status=AuctionStatus.CURRENT)
            .values_list('pk', flat=True)
        )
        if not ids:
            raise ValidationFailed("No active players found. Please activate some players first.")
        self.add_players_to_auction(ids)
        config = active_config()
        if config is not None:
            config.total_players = len(ids)
            config.save(update_fields=['total_players', 'updated_at'])
        self.load_all_data()
        logger.info("queued %s players", len(ids))
        return len(ids)

    def get_next_player(self):
        upcoming = next(
            (p for p in self.players if p['auction_status'] == AuctionStatus.PENDING), None
        )
        if upcoming is None:
            self.current_player = None
            return None
        self.update_player_auction_status(upcoming['id'], AuctionStatus.CURRENT)
        return self.current_player

    def select_player(self, player_id):
        player = get_row(Player.objects, player_id, "Player")
        if not player.is_active or player.auction_status in (AuctionStatus.SOLD, AuctionStatus.INACTIVE):
            raise ValidationFailed(f"{player.name} cannot be put up for auction")
        self.update_player_auction_status(player.pk, AuctionStatus.CURRENT)
        return self.current_player

    def _require_current(self):
        if self.current_player is None:
            raise NotFound("No player is currently up for auction")
        return self.current_player

    def sell_player(self, team_id, price, notes=""):
        current = self._require_current()
        try:
            price = int(price)
        except (TypeError, ValueError):
            raise ValidationFailed("price must be a number")
        if price < current['base_price']:
            raise ValidationFailed(f"price must be at least the base price {current['base_price']}")

        with transaction.atomic():
            assignment = self.team_players_service.assign_player_to_team({
                'team_id': team_id,
                'player_id': current['id'],
                'purchase_price': price,
            })
            entry = self.auction.add_bid_to_history({
                'player_id': current['id'],
                'winning_team_id': team_id,
                'final_price': price,
                'status': HistoryStatus.SOLD,
                'notes': notes or None,
            })
            player, demoted, config = self._persist_status(current['id'], AuctionStatus.SOLD)

        self.auction_history = [entry] + self.auction_history
        self.team_players = [assignment] + self.team_players
        self.load_teams()
        self._apply_status(player, demoted, config)
        logger.info("sold %s to %s for %s", player.name, assignment['team']['name'], price)
        return entry

    def _pass_current(self, status, notes):
        current = self._require_current()
        with transaction.atomic():
            entry = self.auction.add_bid_to_history({
                'player_id': current['id'],
                'status': HistoryStatus.UNSOLD,
                'notes': notes or None,
            })
            player, demoted, config = self._persist_status(current['id'], status)
        self.auction_history = [entry] + self.auction_history
        self._apply_status(player, demoted, config)
        logger.info("%s -> %s", player.name, status)
        return entry

    def mark_unsold(self, notes=""):
        return self._pass_current(AuctionStatus.UNSOLD, notes)

    def skip_current(self):
        current = self._require_current()
        return self.update_player_auction_status(current['id'], AuctionStatus.SKIPPED)

    def start_auction(self):
        self.auction_config = self.auction.start_auction()
        return self.auction_config

    def end_auction(self):
        self.auction_config = self.auction.end_auction()
        return self.auction_config

    def reset_auction(self):
        try:
            self.auction.reset_auction()
        except Exception as e:
            self.error = str(e)
            raise
        self.load_all_data()

    def clear_error(self):
        self.error = None

    def snapshot(self):
        return {
            'auction_config': self.auction_config,
            'current_player': self.current_player,
            'teams': self.teams_with_players,
            'available_teams': self.available_teams,
            'player_queue': self.player_queue,
            'auction_history': self.auction_history,
            'stats': {
                'total_players': self.total_players,
                'sold_players': len(self.sold_players),
                'remaining_players': self.remaining_players,
                'progress_percentage': self.progress_percentage,
            },
            'versions': self.versions,
            'error': self.error,
        }
