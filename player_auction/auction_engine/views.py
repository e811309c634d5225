import logging

from django.contrib.auth import authenticate, get_user_model, login, logout
from django.db import IntegrityError, transaction
from django.http import HttpResponse

from . import analytics, importers, versioning
from .exceptions import NotAuthenticated, ValidationFailed
from .guards import api, ok, payload
from .models import Role, UserRole
from .realtime import table_versions
from .services import (
    AuctionService, AuctionStateService, EventService, PlayersService,
    TeamPlayersService, TeamsService, UsersService,
)
from .services.users import role_for

logger = logging.getLogger(__name__)


def _flag(request, name):
    return request.GET.get(name, '').lower() in ('1', 'true', 'yes')


# --- AUTH ---
def _me(user):
    return {'id': user.pk, 'email': user.email or user.username, 'role': role_for(user)}


def _login_message(error):
    if 'inactive' in error:
        return 'Please confirm your email address before signing in.'
    return 'Invalid email or password. Please check your credentials and try again.'


@api(methods=('POST',), public=True)
def login_view(request):
    data = payload(request)
    email = (data.get('email') or '').strip().lower()
    password = data.get('password') or ''
    if not email or not password:
        raise ValidationFailed('Please fill in all required fields.')

    user = authenticate(request, username=email, password=password)
    if user is None:
        known = get_user_model().objects.filter(username=email, is_active=False).exists()
        raise NotAuthenticated(_login_message('inactive' if known else 'credentials'))
    login(request, user)
    logger.info("%s signed in", email)
    return ok(_me(user))


@api(methods=('POST',), admin_writes=False)
def logout_view(request):
    logout(request)
    return ok()


@api(methods=('POST',), public=True)
def signup_view(request):
    data = payload(request)
    email = (data.get('email') or '').strip().lower()
    password = data.get('password') or ''
    if '@' not in email or len(password) < 6:
        raise ValidationFailed('A valid email and a password of at least 6 characters are required.')
    try:
        with transaction.atomic():
            user = get_user_model().objects.create_user(username=email, email=email, password=password)
            UserRole.objects.create(user=user, role=Role.USER)
    except IntegrityError:
        raise ValidationFailed('An account with this email already exists.')
    login(request, user, backend='django.contrib.auth.backends.ModelBackend')
    return ok(_me(user), status=201)


@api()
def me_view(request):
    return ok(_me(request.user))


# --- TEAMS ---
@api(methods=('GET', 'POST'))
def teams_view(request):
    service = TeamsService()
    if request.method == 'POST':
        return ok(service.create_team(payload(request)), status=201)
    return ok([analytics.team_card(t) for t in service.get_teams()])


@api(methods=('GET', 'PATCH', 'DELETE'))
def team_detail(request, team_id):
    service = TeamsService()
    if request.method == 'PATCH':
        return ok(service.update_team(team_id, payload(request)))
    if request.method == 'DELETE':
        service.delete_team(team_id)
        return ok()
    return ok(analytics.team_card(service.get_team_by_id(team_id)))


@api(methods=('POST',))
def team_toggle(request, team_id):
    return ok(TeamsService().toggle_team_status(team_id))


@api()
def team_stats(request):
    return ok(TeamsService().get_team_stats())


# --- PLAYERS ---
@api(methods=('GET', 'POST'))
def players_view(request):
    service = PlayersService()
    if request.method == 'POST':
        return ok(service.create_player(payload(request)), status=201)

    if _flag(request, 'unsold'):
        return ok(service.get_unsold_players())
    params = request.GET
    if any(k in params for k in ('search', 'category', 'position', 'sort', 'direction')):
        return ok(service.search_players(
            term=params.get('search', ''),
            category=params.get('category', ''),
            position=params.get('position', ''),
            sort_field=params.get('sort', 'name'),
            direction=params.get('direction', 'asc'),
        ))
    return ok(service.get_players())


@api(methods=('GET', 'PATCH', 'DELETE'))
def player_detail(request, player_id):
    service = PlayersService()
    if request.method == 'PATCH':
        return ok(service.update_player(player_id, payload(request)))
    if request.method == 'DELETE':
        service.delete_player(player_id)
        return ok()
    return ok(service.get_player_by_id(player_id))


@api(methods=('POST',))
def player_toggle(request, player_id):
    return ok(PlayersService().toggle_player_status(player_id))


@api()
def player_stats(request):
    return ok(PlayersService().get_player_stats())


@api(methods=('POST',))
def players_bulk_delete(request):
    ids = payload(request).get('player_ids') or []
    if not isinstance(ids, list):
        raise ValidationFailed('player_ids must be a list')
    return ok({'deleted': PlayersService().delete_players(ids)})


@api(methods=('POST',))
def players_import(request):
    if 'file_upload' not in request.FILES:
        raise ValidationFailed('Attach the player sheet as file_upload')
    upload = request.FILES['file_upload']
    return ok({'imported': importers.import_players(upload, upload.name)}, status=201)


# --- TEAM PLAYERS ---
@api(methods=('GET', 'POST'))
def team_players_view(request):
    service = TeamPlayersService()
    if request.method == 'POST':
        return ok(service.assign_player_to_team(payload(request)), status=201)
    if request.GET.get('team_id'):
        return ok(service.get_players_for_team(request.GET['team_id']))
    if _flag(request, 'ids'):
        return ok(service.get_sold_players())
    return ok(service.get_team_players())


@api(methods=('DELETE',))
def team_player_detail(request, team_player_id):
    TeamPlayersService().remove_player_from_team(team_player_id)
    return ok()


@api(methods=('POST',))
def team_player_sell_back(request, team_player_id):
    return ok(TeamPlayersService().sell_player_back_to_pool(team_player_id))


# --- AUCTION CONFIG / HISTORY ---
@api(methods=('GET', 'POST'))
def auction_config_view(request):
    service = AuctionService()
    if request.method == 'POST':
        return ok(service.create_auction_config(payload(request)), status=201)
    if _flag(request, 'current'):
        return ok(service.get_current_auction())
    return ok(service.get_auction_config())


@api(methods=('PATCH', 'DELETE'))
def auction_config_detail(request, config_id):
    service = AuctionService()
    if request.method == 'DELETE':
        service.delete_auction_config(config_id)
        return ok()
    return ok(service.update_auction_config(config_id, payload(request)))


@api(methods=('GET', 'DELETE'))
def auction_history_view(request):
    service = AuctionService()
    if request.method == 'DELETE':
        service.clear_auction_history()
        return ok()
    history = service.get_auction_history()
    return ok({
        'history': analytics.sort_history(history, request.GET.get('sort', 'time')),
        'summary': analytics.history_summary(history),
    })


# --- LIVE AUCTION ---
def _state_payload(state):
    snapshot = state.snapshot()
    snapshot['teams'] = [analytics.team_card(t) for t in snapshot['teams']]
    return snapshot


@api()
def get_state(request):
    state = AuctionStateService().load_all_data()
    return ok(_state_payload(state))


@api(methods=('POST',))
def api_action(request):
    data = payload(request)
    action = (data.get('action') or '').upper()
    state = AuctionStateService().load_all_data()
    result = None

    if action == 'INITIALIZE':
        result = {'queued': state.initialize_auction()}

    elif action == 'SELECT':
        result = state.select_player(data.get('player_id'))

    elif action == 'NEXT':
        result = state.get_next_player()

    elif action == 'SELL':
        result = state.sell_player(data.get('team_id'), data.get('price'), data.get('notes', ''))

    elif action == 'UNSOLD':
        result = state.mark_unsold(data.get('notes', ''))

    elif action == 'SKIP':
        result = state.skip_current()

    elif action == 'START':
        result = state.start_auction()

    elif action == 'END':
        result = state.end_auction()

    elif action == 'RESET':
        state.reset_auction()

    else:
        raise ValidationFailed(f"Unknown action {action!r}")

    return ok({'result': result, 'state': _state_payload(state)})


@api()
def changes_view(request):
    return ok(table_versions())


# --- USERS ---
@api(admin=True)
def users_view(request):
    service = UsersService()
    users = service.get_users()
    for u in users:
        u['role_config'] = service.get_role_config(u['role'])
        u['provider_label'] = service.get_provider_label(u['provider'])
        u['last_sign_in_display'] = service.format_date(u['last_sign_in_at'])
    return ok({'users': users, 'stats': service.get_user_stats()})


@api(methods=('POST',), admin=True)
def user_role(request, user_id):
    role = payload(request).get('role')
    UsersService().update_user_role(request.user, user_id, role)
    return ok({'user_id': user_id, 'role': role})


# --- EVENTS ---
@api(methods=('GET', 'POST'))
def events_view(request):
    service = EventService()
    if request.method == 'POST':
        return ok(service.create_event(payload(request)), status=201)
    if request.GET.get('type'):
        return ok(service.get_events_by_type(request.GET['type']))
    if _flag(request, 'active'):
        return ok(service.get_active_events())
    if request.GET.get('upcoming'):
        try:
            limit = int(request.GET['upcoming'])
        except ValueError:
            raise ValidationFailed('upcoming must be a number')
        return ok(service.get_upcoming_events(limit))
    return ok(service.get_events())


@api(methods=('GET', 'PATCH', 'DELETE'))
def event_detail(request, event_id):
    service = EventService()
    if request.method == 'PATCH':
        return ok(service.update_event(event_id, payload(request)))
    if request.method == 'DELETE':
        service.delete_event(event_id)
        return ok()
    return ok(service.get_event_by_id(event_id))


# --- MISC ---
@api()
def dashboard_view(request):
    return ok(analytics.dashboard_summary(request.user))


@api(public=True)
def version_view(request):
    return ok({
        **versioning.get_build_info(),
        'label': versioning.get_version_with_prefix(),
        'short': versioning.get_short_version_with_prefix(),
    })


@api()
def export_csv(request):
    response = HttpResponse(content_type='text/csv')
    response['Content-Disposition'] = 'attachment; filename="auction_final_report.csv"'
    importers.build_report().to_csv(path_or_buf=response, index=False)
    return response
