from django.contrib import admin

from .models import AuctionConfig, AuctionHistory, Event, Player, Team, TeamPlayer, UserRole


@admin.register(Team)
class TeamAdmin(admin.ModelAdmin):
    list_display = ('name', 'short_name', 'budget_cap', 'budget_spent', 'players_count', 'max_players', 'is_active')
    list_filter = ('is_active',)
    search_fields = ('name', 'short_name')


@admin.register(Player)
class PlayerAdmin(admin.ModelAdmin):
    list_display = ('name', 'category', 'position', 'base_price', 'auction_status', 'is_sold', 'is_active')
    list_filter = ('auction_status', 'category', 'is_active')
    search_fields = ('name', 'nationality')


@admin.register(TeamPlayer)
class TeamPlayerAdmin(admin.ModelAdmin):
    list_display = ('player', 'team', 'purchase_price', 'purchased_at')
    list_select_related = ('player', 'team')


@admin.register(AuctionHistory)
class AuctionHistoryAdmin(admin.ModelAdmin):
    list_display = ('player', 'winning_team', 'final_price', 'status', 'sold_at')
    list_filter = ('status',)


admin.site.register(AuctionConfig)
admin.site.register(UserRole)
admin.site.register(Event)
