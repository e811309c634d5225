import logging

from django.db import transaction
from django.db.models import Count, Q, Sum

from ..exceptions import BudgetExceeded, RosterFull
from ..models import AuctionHistory, AuctionStatus, HistoryStatus, Player, Team
from ..realtime import notify_change
from ..serializers import team_dict
from .base import get_row, pick_fields, save_row

logger = logging.getLogger(__name__)

CREATE_FIELDS = (
    'name', 'short_name', 'logo_url', 'primary_color', 'secondary_color',
    'budget_cap', 'max_players',
)
UPDATE_FIELDS = CREATE_FIELDS + ('is_active',)


class TeamsService:
    def __init__(self):
        self.teams = []

    def get_teams(self):
        self.teams = [team_dict(t) for t in Team.objects.order_by('-created_at')]
        return self.teams

    def get_team_by_id(self, team_id):
        return team_dict(get_row(Team.objects, team_id, "Team"))

    def create_team(self, data):
        fields = pick_fields(data, CREATE_FIELDS)
        # None means "use the default" for the optional fields
        fields = {k: v for k, v in fields.items() if v is not None}
        team = save_row(Team(**fields))
        logger.info("created team %s (%s)", team.name, team.id)
        row = team_dict(team)
        self.teams.insert(0, row)
        return row

    def update_team(self, team_id, data):
        with transaction.atomic():
            team = get_row(Team.objects.select_for_update(), team_id, "Team")
            for field, value in pick_fields(data, UPDATE_FIELDS).items():
                setattr(team, field, value)
            save_row(team)
            # raising here rolls the save back
            if team.budget_cap < team.budget_spent:
                raise BudgetExceeded(
                    f"{team.name} has already spent {team.budget_spent}, budget cannot drop to {team.budget_cap}"
                )
            if team.max_players < team.players_count:
                raise RosterFull(
                    f"{team.name} already has {team.players_count} players, limit cannot drop to {team.max_players}"
                )
        row = team_dict(team)
        self.teams = [row if t['id'] == team.id else t for t in self.teams]
        return row

    def delete_team(self, team_id):
        """Delete a team and send its roster back to the pool."""
        with transaction.atomic():
            team = get_row(Team.objects.select_for_update(), team_id, "Team")
            player_ids = list(team.team_players.values_list('player_id', flat=True))
            if player_ids:
                Player.objects.filter(pk__in=player_ids).update(
                    is_sold=False, auction_status=AuctionStatus.PENDING
                )
                AuctionHistory.objects.filter(
                    player_id__in=player_ids, status=HistoryStatus.SOLD
                ).update(status=HistoryStatus.WITHDRAWN)
                notify_change('players', 'auction_history')
            team.delete()
        logger.info("deleted team %s, released %s players", team_id, len(player_ids))
        self.teams = [t for t in self.teams if str(t['id']) != str(team_id)]

    def toggle_team_status(self, team_id):
        team = get_row(Team.objects, team_id, "Team")
        return self.update_team(team.id, {'is_active': not team.is_active})

    def get_team_stats(self):
        totals = Team.objects.aggregate(
            total_teams=Count('id'),
            active_teams=Count('id', filter=Q(is_active=True)),
            total_players=Sum('players_count'),
            total_budget=Sum('budget_cap'),
            total_spent=Sum('budget_spent'),
        )
        per_team = [
            {
                'id': t.id,
                'name': t.name,
                'players_count': t.players_count,
                'budget_spent': t.budget_spent,
                'budget_remaining': t.budget_remaining,
            }
            for t in Team.objects.order_by('name')
        ]
        return {
            'total_teams': totals['total_teams'],
            'active_teams': totals['active_teams'],
            'total_players': totals['total_players'] or 0,
            'total_budget': totals['total_budget'] or 0,
            'total_spent': totals['total_spent'] or 0,
            'teams': per_team,
        }
