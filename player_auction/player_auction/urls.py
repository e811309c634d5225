from django.contrib import admin
from django.urls import path
from auction_engine import views

urlpatterns = [
    path('admin/', admin.site.urls),

    # Auth
    path('api/auth/login/', views.login_view, name='login'),
    path('api/auth/logout/', views.logout_view, name='logout'),
    path('api/auth/signup/', views.signup_view, name='signup'),
    path('api/auth/me/', views.me_view, name='me'),

    # Teams
    path('api/teams/', views.teams_view, name='teams'),
    path('api/teams/stats/', views.team_stats, name='team_stats'),
    path('api/teams/<str:team_id>/', views.team_detail, name='team_detail'),
    path('api/teams/<str:team_id>/toggle/', views.team_toggle, name='team_toggle'),

    # Players
    path('api/players/', views.players_view, name='players'),
    path('api/players/stats/', views.player_stats, name='player_stats'),
    path('api/players/bulk-delete/', views.players_bulk_delete, name='players_bulk_delete'),
    path('api/players/import/', views.players_import, name='players_import'),
    path('api/players/<str:player_id>/', views.player_detail, name='player_detail'),
    path('api/players/<str:player_id>/toggle/', views.player_toggle, name='player_toggle'),

    # Rosters
    path('api/team-players/', views.team_players_view, name='team_players'),
    path('api/team-players/<str:team_player_id>/', views.team_player_detail, name='team_player_detail'),
    path('api/team-players/<str:team_player_id>/sell-back/', views.team_player_sell_back, name='team_player_sell_back'),

    # Auction
    path('api/auction/config/', views.auction_config_view, name='auction_config'),
    path('api/auction/config/<str:config_id>/', views.auction_config_detail, name='auction_config_detail'),
    path('api/auction/state/', views.get_state, name='auction_state'),
    path('api/auction/action/', views.api_action, name='auction_action'),
    path('api/auction/history/', views.auction_history_view, name='auction_history'),
    path('api/changes/', views.changes_view, name='changes'),

    # Users
    path('api/users/', views.users_view, name='users'),
    path('api/users/<int:user_id>/role/', views.user_role, name='user_role'),

    # Events
    path('api/events/', views.events_view, name='events'),
    path('api/events/<str:event_id>/', views.event_detail, name='event_detail'),

    path('api/dashboard/', views.dashboard_view, name='dashboard'),
    path('api/version/', views.version_view, name='version'),
    path('export/', views.export_csv, name='export'),
]
