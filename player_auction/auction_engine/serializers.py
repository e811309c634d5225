"""Row -> dict conversion for the JSON API and the state mirrors.

Values are left as UUID / datetime / timedelta objects; JsonResponse encodes
them with DjangoJSONEncoder.
"""


def team_dict(team):
    return {
        'id': team.id,
        'name': team.name,
        'short_name': team.short_name,
        'logo_url': team.logo_url,
        'primary_color': team.primary_color,
        'secondary_color': team.secondary_color,
        'budget_cap': team.budget_cap,
        'budget_spent': team.budget_spent,
        'budget_remaining': team.budget_remaining,
        'players_count': team.players_count,
        'max_players': team.max_players,
        'is_active': team.is_active,
        'created_at': team.created_at,
        'updated_at': team.updated_at,
    }


def player_dict(player):
    return {
        'id': player.id,
        'name': player.name,
        'position': player.position,
        'category': player.category,
        'subcategory': player.subcategory,
        'base_price': player.base_price,
        'image_url': player.image_url,
        'nationality': player.nationality,
        'age': player.age,
        'experience_years': player.experience_years,
        'stats': player.stats,
        'is_sold': player.is_sold,
        'is_active': player.is_active,
        'auction_status': player.auction_status,
        'created_at': player.created_at,
        'updated_at': player.updated_at,
    }


def config_dict(config):
    if config is None:
        return None
    return {
        'id': config.id,
        'name': config.name,
        'description': config.description,
        'budget_cap': config.budget_cap,
        'max_players_per_team': config.max_players_per_team,
        'min_players_per_team': config.min_players_per_team,
        'status': config.status,
        'current_player_id': config.current_player_id,
        'current_player_position': config.current_player_position,
        'total_players': config.total_players,
        'created_at': config.created_at,
        'updated_at': config.updated_at,
        'started_at': config.started_at,
        'completed_at': config.completed_at,
    }


def history_dict(entry):
    return {
        'id': entry.id,
        'player_id': entry.player_id,
        'winning_team_id': entry.winning_team_id,
        'final_price': entry.final_price,
        'auction_date': entry.auction_date,
        'sold_at': entry.sold_at,
        'auction_round': entry.auction_round,
        'bidding_duration': entry.bidding_duration,
        'notes': entry.notes,
        'status': entry.status,
        'player': player_dict(entry.player),
        'team': team_dict(entry.winning_team) if entry.winning_team_id else None,
    }


def team_player_dict(assignment):
    return {
        'id': assignment.id,
        'team_id': assignment.team_id,
        'player_id': assignment.player_id,
        'purchase_price': assignment.purchase_price,
        'purchased_at': assignment.purchased_at,
        'position_in_team': assignment.position_in_team,
        'is_captain': assignment.is_captain,
        'is_vice_captain': assignment.is_vice_captain,
        'team': team_dict(assignment.team),
        'player': player_dict(assignment.player),
    }


def event_dict(event):
    return {
        'id': event.id,
        'name': event.name,
        'description': event.description,
        'event_type': event.event_type,
        'start_date': event.start_date,
        'end_date': event.end_date,
        'status': event.status,
        'created_at': event.created_at,
        'updated_at': event.updated_at,
    }
