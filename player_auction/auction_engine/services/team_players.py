import logging

from django.db import transaction
from django.db.models import F

from ..exceptions import BudgetExceeded, RosterFull, ValidationFailed
from ..models import AuctionHistory, AuctionStatus, HistoryStatus, Player, Team, TeamPlayer
from ..realtime import notify_change
from ..serializers import team_player_dict
from .base import get_row, pick_fields, save_row

logger = logging.getLogger(__name__)

ASSIGN_FIELDS = ('team_id', 'player_id', 'purchase_price', 'position_in_team', 'purchased_at')


class TeamPlayersService:
    """Roster assignments. Keeps team budget and player counts in step with the join rows."""

    def __init__(self):
        self.team_players = []

    def _queryset(self):
        return TeamPlayer.objects.select_related('team', 'player')

    def get_team_players(self):
        rows = self._queryset().order_by('-purchased_at')
        self.team_players = [team_player_dict(tp) for tp in rows]
        return self.team_players

    def get_players_for_team(self, team_id):
        team = get_row(Team.objects, team_id, "Team")
        rows = self._queryset().filter(team=team).order_by('-purchased_at')
        return [team_player_dict(tp) for tp in rows]

    def assign_player_to_team(self, data):
        fields = pick_fields(data, ASSIGN_FIELDS)
        fields.pop('purchased_at', None)  # stamped by the database
        try:
            price = int(fields.get('purchase_price'))
        except (TypeError, ValueError):
            raise ValidationFailed("purchase_price must be a number")
        if price < 0:
            raise ValidationFailed("purchase_price cannot be negative")

        with transaction.atomic():
            team = get_row(Team.objects.select_for_update(), fields.get('team_id'), "Team")
            player = get_row(Player.objects.select_for_update(), fields.get('player_id'), "Player")

            if not team.has_roster_slot():
                raise RosterFull(f"{team.name} already has {team.players_count} players")
            if not team.can_afford(price):
                raise BudgetExceeded(
                    f"{team.name} has {team.budget_remaining} left, cannot pay {price}"
                )

            assignment = save_row(TeamPlayer(
                team=team,
                player=player,
                purchase_price=price,
                position_in_team=fields.get('position_in_team') or "",
            ))

            team.budget_spent = F('budget_spent') + price
            team.players_count = F('players_count') + 1
            team.save(update_fields=['budget_spent', 'players_count', 'updated_at'])
            team.refresh_from_db()

            player.is_sold = True
            player.auction_status = AuctionStatus.SOLD
            player.save(update_fields=['is_sold', 'auction_status', 'updated_at'])

        logger.info("assigned %s to %s for %s", player.name, team.name, price)
        row = team_player_dict(assignment)
        self.team_players.insert(0, row)
        return row

    def _release(self, team_player_id, player_status):
        with transaction.atomic():
            assignment = get_row(
                self._queryset().select_for_update(), team_player_id, "Team player"
            )
            team = Team.objects.select_for_update().get(pk=assignment.team_id)
            player = assignment.player
            price = assignment.purchase_price
            assignment.delete()

            # never let the bookkeeping go negative after a manual edit
            team.budget_spent = max(team.budget_spent - price, 0)
            team.players_count = max(team.players_count - 1, 0)
            team.save(update_fields=['budget_spent', 'players_count', 'updated_at'])

            player.is_sold = False
            player.auction_status = player_status
            player.save(update_fields=['is_sold', 'auction_status', 'updated_at'])

            # withdrawn sales drop out of progress
            withdrawn = AuctionHistory.objects.filter(
                player=player, status=HistoryStatus.SOLD
            ).update(status=HistoryStatus.WITHDRAWN)
            if withdrawn:
                notify_change('auction_history')

        self.team_players = [tp for tp in self.team_players if str(tp['id']) != str(team_player_id)]
        return team, player, price

    def remove_player_from_team(self, team_player_id):
        team, player, price = self._release(team_player_id, AuctionStatus.UNSOLD)
        logger.info("removed %s from %s", player.name, team.name)

    def sell_player_back_to_pool(self, team_player_id):
        team, player, price = self._release(team_player_id, AuctionStatus.PENDING)
        logger.info("sold %s back to pool, refunded %s to %s", player.name, price, team.name)
        return {
            'team_id': team.id,
            'player_id': player.id,
            'refund_amount': price,
        }

    def get_sold_players(self):
        return list(TeamPlayer.objects.values_list('player_id', flat=True))
