from .models import AuctionConfig, AuctionHistory, ConfigStatus, HistoryStatus, Player, Team
from .services.auction_state import percentage


def _pct(part, whole):
    if not whole:
        return 0.0
    return part * 100 / whole


def team_card(team):
    """Budget and roster gauges for one team dict (with or without ``players``)."""
    budget_pct = _pct(team['budget_spent'], team['budget_cap'])
    count = len(team.get('players') or []) or team['players_count']
    player_pct = _pct(count, team['max_players'])

    if budget_pct > 80:
        budget_level = 'high'
    elif budget_pct > 50:
        budget_level = 'medium'
    else:
        budget_level = 'low'

    if player_pct >= 100:
        player_level = 'full'
    elif player_pct > 80:
        player_level = 'high'
    else:
        player_level = 'ok'

    if not team['is_active']:
        status_level = 'inactive'
    else:
        status_level = budget_level

    return {
        **team,
        'budget_percentage': budget_pct,
        'player_percentage': player_pct,
        'budget_level': budget_level,
        'player_level': player_level,
        'status_level': status_level,
        'player_count': count,
    }


def _is_sale(entry):
    return bool(entry['winning_team_id']) and entry['status'] == HistoryStatus.SOLD


def history_summary(history):
    sold = [h for h in history if _is_sale(h)]
    unsold = [h for h in history if not h['winning_team_id'] or h['status'] == HistoryStatus.UNSOLD]
    revenue = sum(h['final_price'] or 0 for h in sold)
    return {
        'total_transactions': len(history),
        'sold_players': len(sold),
        'unsold_players': len(unsold),
        'total_revenue': revenue,
        'average_price': revenue / len(sold) if sold else 0,
    }


def sort_history(history, option='time'):
    if option == 'name':
        return sorted(history, key=lambda h: ((h.get('player') or {}).get('name') or '').lower())
    if option == 'price':
        return sorted(history, key=lambda h: h['final_price'] or 0, reverse=True)
    return sorted(history, key=lambda h: (h['auction_date'], h['sold_at']), reverse=True)


def welcome_message(user):
    email = getattr(user, 'email', '') or ''
    if email:
        return f"Welcome back, {email.split('@')[0]}!"
    return "Welcome to your dashboard!"


def dashboard_summary(user):
    sold = AuctionHistory.objects.filter(status=HistoryStatus.SOLD, winning_team__isnull=False)
    total_players = Player.objects.filter(is_active=True).count()
    return {
        'welcome_message': welcome_message(user),
        'configs': AuctionConfig.objects.count(),
        'active_auctions': AuctionConfig.objects.filter(status=ConfigStatus.ACTIVE).count(),
        'completed_auctions': AuctionConfig.objects.filter(status=ConfigStatus.COMPLETED).count(),
        'teams': Team.objects.filter(is_active=True).count(),
        'players': total_players,
        'sales': sold.count(),
        'progress_percentage': percentage(sold.count(), total_players),
    }
