from django.conf import settings
from django.db import models
import uuid


def _default(key):
    return settings.AUCTION_DEFAULTS[key]


def default_budget_cap(): return _default('budget_cap')
def default_max_players(): return _default('max_players')
def default_min_players(): return _default('min_players')
def default_base_price(): return _default('base_price')
def default_primary_color(): return _default('primary_color')
def default_secondary_color(): return _default('secondary_color')


class AuctionStatus(models.TextChoices):
    PENDING = 'PENDING'
    CURRENT = 'CURRENT'
    SOLD = 'SOLD'
    UNSOLD = 'UNSOLD'
    SKIPPED = 'SKIPPED'
    INACTIVE = 'INACTIVE'


class ConfigStatus(models.TextChoices):
    DRAFT = 'DRAFT'
    ACTIVE = 'ACTIVE'
    COMPLETED = 'COMPLETED'


class HistoryStatus(models.TextChoices):
    SOLD = 'SOLD'
    UNSOLD = 'UNSOLD'
    WITHDRAWN = 'WITHDRAWN'


class Role(models.TextChoices):
    ADMIN = 'admin', 'Admin'
    USER = 'user', 'User'
    VIEWER = 'viewer', 'Viewer'


class Team(models.Model):
    id = models.UUIDField(primary_key=True, default=uuid.uuid4, editable=False)
    name = models.CharField(max_length=100)
    short_name = models.CharField(max_length=10, blank=True, default="")
    logo_url = models.TextField(blank=True, default="")
    primary_color = models.CharField(max_length=20, default=default_primary_color)
    secondary_color = models.CharField(max_length=20, default=default_secondary_color)
    budget_cap = models.BigIntegerField(default=default_budget_cap)
    budget_spent = models.BigIntegerField(default=0)
    players_count = models.IntegerField(default=0)
    max_players = models.IntegerField(default=default_max_players)
    is_active = models.BooleanField(default=True)
    created_at = models.DateTimeField(auto_now_add=True)
    updated_at = models.DateTimeField(auto_now=True)

    class Meta:
        db_table = 'teams'

    @property
    def budget_remaining(self):
        return self.budget_cap - self.budget_spent

    def can_afford(self, price):
        return self.budget_spent + price <= self.budget_cap

    def has_roster_slot(self):
        return self.players_count < self.max_players

    def __str__(self): return self.name


class Player(models.Model):
    id = models.UUIDField(primary_key=True, default=uuid.uuid4, editable=False)
    name = models.CharField(max_length=100)
    position = models.CharField(max_length=50, default="Middle Order")
    category = models.CharField(max_length=50, default="Batsman")
    subcategory = models.CharField(max_length=50, blank=True, default="")
    base_price = models.BigIntegerField(default=default_base_price)
    image_url = models.TextField(blank=True, default="")
    nationality = models.CharField(max_length=50, blank=True, default="")
    age = models.IntegerField(null=True, blank=True)
    experience_years = models.IntegerField(null=True, blank=True)
    stats = models.JSONField(null=True, blank=True)
    is_sold = models.BooleanField(default=False)
    is_active = models.BooleanField(default=True)
    auction_status = models.CharField(
        max_length=10, choices=AuctionStatus.choices, default=AuctionStatus.PENDING
    )
    created_at = models.DateTimeField(auto_now_add=True)
    updated_at = models.DateTimeField(auto_now=True)

    class Meta:
        db_table = 'players'

    def __str__(self): return self.name


class AuctionConfig(models.Model):
    id = models.UUIDField(primary_key=True, default=uuid.uuid4, editable=False)
    name = models.CharField(max_length=200)
    description = models.TextField(blank=True, default="")
    budget_cap = models.BigIntegerField(default=default_budget_cap)
    max_players_per_team = models.IntegerField(default=default_max_players)
    min_players_per_team = models.IntegerField(default=default_min_players)
    status = models.CharField(
        max_length=10, choices=ConfigStatus.choices, default=ConfigStatus.DRAFT
    )
    current_player = models.ForeignKey(
        Player, on_delete=models.SET_NULL, null=True, blank=True, related_name='+'
    )
    current_player_position = models.IntegerField(default=0)
    total_players = models.IntegerField(default=0)
    created_at = models.DateTimeField(auto_now_add=True)
    updated_at = models.DateTimeField(auto_now=True)
    started_at = models.DateTimeField(null=True, blank=True)
    completed_at = models.DateTimeField(null=True, blank=True)

    class Meta:
        db_table = 'auction_config'

    def __str__(self): return self.name


class AuctionHistory(models.Model):
    id = models.UUIDField(primary_key=True, default=uuid.uuid4, editable=False)
    player = models.ForeignKey(Player, on_delete=models.CASCADE, related_name='history')
    winning_team = models.ForeignKey(
        Team, on_delete=models.SET_NULL, null=True, blank=True, related_name='wins'
    )
    final_price = models.BigIntegerField(null=True, blank=True)
    auction_date = models.DateField()
    sold_at = models.DateTimeField(auto_now_add=True)
    auction_round = models.IntegerField(null=True, blank=True)
    bidding_duration = models.DurationField(null=True, blank=True)
    notes = models.TextField(blank=True, default="")
    status = models.CharField(max_length=10, choices=HistoryStatus.choices)

    class Meta:
        db_table = 'auction_history'


class TeamPlayer(models.Model):
    id = models.UUIDField(primary_key=True, default=uuid.uuid4, editable=False)
    team = models.ForeignKey(Team, on_delete=models.CASCADE, related_name='team_players')
    # a player can be on one roster at a time
    player = models.OneToOneField(Player, on_delete=models.CASCADE, related_name='assignment')
    purchase_price = models.BigIntegerField()
    purchased_at = models.DateTimeField(auto_now_add=True)
    position_in_team = models.CharField(max_length=50, blank=True, default="")
    is_captain = models.BooleanField(default=False)
    is_vice_captain = models.BooleanField(default=False)

    class Meta:
        db_table = 'team_players'

    def __str__(self): return f"{self.player} -> {self.team}"


class UserRole(models.Model):
    user = models.OneToOneField(
        settings.AUTH_USER_MODEL, on_delete=models.CASCADE, related_name='auction_role'
    )
    role = models.CharField(max_length=10, choices=Role.choices, default=Role.USER)
    provider = models.CharField(max_length=20, default="email")
    updated_at = models.DateTimeField(auto_now=True)

    class Meta:
        db_table = 'user_roles'

    def __str__(self): return f"{self.user} ({self.role})"


class Event(models.Model):
    class EventType(models.TextChoices):
        AUCTION = 'auction'
        DRAFT = 'draft'
        TRADE = 'trade'
        OTHER = 'other'

    class Status(models.TextChoices):
        SCHEDULED = 'scheduled'
        ACTIVE = 'active'
        COMPLETED = 'completed'
        CANCELLED = 'cancelled'

    id = models.UUIDField(primary_key=True, default=uuid.uuid4, editable=False)
    name = models.CharField(max_length=200)
    description = models.TextField(blank=True, default="")
    event_type = models.CharField(max_length=10, choices=EventType.choices)
    start_date = models.DateTimeField()
    end_date = models.DateTimeField()
    status = models.CharField(max_length=10, choices=Status.choices, default=Status.SCHEDULED)
    created_at = models.DateTimeField(auto_now_add=True)
    updated_at = models.DateTimeField(auto_now=True)

    class Meta:
        db_table = 'events'

    def __str__(self): return self.name


class ChangeCounter(models.Model):
    """Write counter per watched table, shared by every worker process."""

    table = models.CharField(max_length=40, primary_key=True)
    version = models.BigIntegerField(default=0)

    class Meta:
        db_table = 'change_counters'

    def __str__(self): return f"{self.table} v{self.version}"
