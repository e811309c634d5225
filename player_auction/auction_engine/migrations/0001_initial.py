import uuid

import auction_engine.models
import django.db.models.deletion
from django.conf import settings
from django.db import migrations, models


class Migration(migrations.Migration):

    initial = True

    dependencies = [
        migrations.swappable_dependency(settings.AUTH_USER_MODEL),
    ]

    operations = [
        migrations.CreateModel(
            name="Team",
            fields=[
                ("id", models.UUIDField(default=uuid.uuid4, editable=False, primary_key=True, serialize=False)),
                ("name", models.CharField(max_length=100)),
                ("short_name", models.CharField(blank=True, default="", max_length=10)),
                ("logo_url", models.TextField(blank=True, default="")),
                ("primary_color", models.CharField(default=auction_engine.models.default_primary_color, max_length=20)),
                ("secondary_color", models.CharField(default=auction_engine.models.default_secondary_color, max_length=20)),
                ("budget_cap", models.BigIntegerField(default=auction_engine.models.default_budget_cap)),
                ("budget_spent", models.BigIntegerField(default=0)),
                ("players_count", models.IntegerField(default=0)),
                ("max_players", models.IntegerField(default=auction_engine.models.default_max_players)),
                ("is_active", models.BooleanField(default=True)),
                ("created_at", models.DateTimeField(auto_now_add=True)),
                ("updated_at", models.DateTimeField(auto_now=True)),
            ],
            options={"db_table": "teams"},
        ),
        migrations.CreateModel(
            name="Player",
            fields=[
                ("id", models.UUIDField(default=uuid.uuid4, editable=False, primary_key=True, serialize=False)),
                ("name", models.CharField(max_length=100)),
                ("position", models.CharField(default="Middle Order", max_length=50)),
                ("category", models.CharField(default="Batsman", max_length=50)),
                ("subcategory", models.CharField(blank=True, default="", max_length=50)),
                ("base_price", models.BigIntegerField(default=auction_engine.models.default_base_price)),
                ("image_url", models.TextField(blank=True, default="")),
                ("nationality", models.CharField(blank=True, default="", max_length=50)),
                ("age", models.IntegerField(blank=True, null=True)),
                ("experience_years", models.IntegerField(blank=True, null=True)),
                ("stats", models.JSONField(blank=True, null=True)),
                ("is_sold", models.BooleanField(default=False)),
                ("is_active", models.BooleanField(default=True)),
                (
                    "auction_status",
                    models.CharField(
                        choices=[
                            ("PENDING", "Pending"),
                            ("CURRENT", "Current"),
                            ("SOLD", "Sold"),
                            ("UNSOLD", "Unsold"),
                            ("SKIPPED", "Skipped"),
                            ("INACTIVE", "Inactive"),
                        ],
                        default="PENDING",
                        max_length=10,
                    ),
                ),
                ("created_at", models.DateTimeField(auto_now_add=True)),
                ("updated_at", models.DateTimeField(auto_now=True)),
            ],
            options={"db_table": "players"},
        ),
        migrations.CreateModel(
            name="AuctionConfig",
            fields=[
                ("id", models.UUIDField(default=uuid.uuid4, editable=False, primary_key=True, serialize=False)),
                ("name", models.CharField(max_length=200)),
                ("description", models.TextField(blank=True, default="")),
                ("budget_cap", models.BigIntegerField(default=auction_engine.models.default_budget_cap)),
                ("max_players_per_team", models.IntegerField(default=auction_engine.models.default_max_players)),
                ("min_players_per_team", models.IntegerField(default=auction_engine.models.default_min_players)),
                (
                    "status",
                    models.CharField(
                        choices=[("DRAFT", "Draft"), ("ACTIVE", "Active"), ("COMPLETED", "Completed")],
                        default="DRAFT",
                        max_length=10,
                    ),
                ),
                ("current_player_position", models.IntegerField(default=0)),
                ("total_players", models.IntegerField(default=0)),
                ("created_at", models.DateTimeField(auto_now_add=True)),
                ("updated_at", models.DateTimeField(auto_now=True)),
                ("started_at", models.DateTimeField(blank=True, null=True)),
                ("completed_at", models.DateTimeField(blank=True, null=True)),
                (
                    "current_player",
                    models.ForeignKey(
                        blank=True,
                        null=True,
                        on_delete=django.db.models.deletion.SET_NULL,
                        related_name="+",
                        to="auction_engine.player",
                    ),
                ),
            ],
            options={"db_table": "auction_config"},
        ),
        migrations.CreateModel(
            name="AuctionHistory",
            fields=[
                ("id", models.UUIDField(default=uuid.uuid4, editable=False, primary_key=True, serialize=False)),
                ("final_price", models.BigIntegerField(blank=True, null=True)),
                ("auction_date", models.DateField()),
                ("sold_at", models.DateTimeField(auto_now_add=True)),
                ("auction_round", models.IntegerField(blank=True, null=True)),
                ("bidding_duration", models.DurationField(blank=True, null=True)),
                ("notes", models.TextField(blank=True, default="")),
                (
                    "status",
                    models.CharField(
                        choices=[("SOLD", "Sold"), ("UNSOLD", "Unsold"), ("WITHDRAWN", "Withdrawn")],
                        max_length=10,
                    ),
                ),
                (
                    "player",
                    models.ForeignKey(
                        on_delete=django.db.models.deletion.CASCADE,
                        related_name="history",
                        to="auction_engine.player",
                    ),
                ),
                (
                    "winning_team",
                    models.ForeignKey(
                        blank=True,
                        null=True,
                        on_delete=django.db.models.deletion.SET_NULL,
                        related_name="wins",
                        to="auction_engine.team",
                    ),
                ),
            ],
            options={"db_table": "auction_history"},
        ),
        migrations.CreateModel(
            name="TeamPlayer",
            fields=[
                ("id", models.UUIDField(default=uuid.uuid4, editable=False, primary_key=True, serialize=False)),
                ("purchase_price", models.BigIntegerField()),
                ("purchased_at", models.DateTimeField(auto_now_add=True)),
                ("position_in_team", models.CharField(blank=True, default="", max_length=50)),
                ("is_captain", models.BooleanField(default=False)),
                ("is_vice_captain", models.BooleanField(default=False)),
                (
                    "team",
                    models.ForeignKey(
                        on_delete=django.db.models.deletion.CASCADE,
                        related_name="team_players",
                        to="auction_engine.team",
                    ),
                ),
                (
                    "player",
                    models.OneToOneField(
                        on_delete=django.db.models.deletion.CASCADE,
                        related_name="assignment",
                        to="auction_engine.player",
                    ),
                ),
            ],
            options={"db_table": "team_players"},
        ),
        migrations.CreateModel(
            name="UserRole",
            fields=[
                ("id", models.BigAutoField(auto_created=True, primary_key=True, serialize=False, verbose_name="ID")),
                (
                    "role",
                    models.CharField(
                        choices=[("admin", "Admin"), ("user", "User"), ("viewer", "Viewer")],
                        default="user",
                        max_length=10,
                    ),
                ),
                ("provider", models.CharField(default="email", max_length=20)),
                ("updated_at", models.DateTimeField(auto_now=True)),
                (
                    "user",
                    models.OneToOneField(
                        on_delete=django.db.models.deletion.CASCADE,
                        related_name="auction_role",
                        to=settings.AUTH_USER_MODEL,
                    ),
                ),
            ],
            options={"db_table": "user_roles"},
        ),
        migrations.CreateModel(
            name="Event",
            fields=[
                ("id", models.UUIDField(default=uuid.uuid4, editable=False, primary_key=True, serialize=False)),
                ("name", models.CharField(max_length=200)),
                ("description", models.TextField(blank=True, default="")),
                (
                    "event_type",
                    models.CharField(
                        choices=[("auction", "Auction"), ("draft", "Draft"), ("trade", "Trade"), ("other", "Other")],
                        max_length=10,
                    ),
                ),
                ("start_date", models.DateTimeField()),
                ("end_date", models.DateTimeField()),
                (
                    "status",
                    models.CharField(
                        choices=[
                            ("scheduled", "Scheduled"),
                            ("active", "Active"),
                            ("completed", "Completed"),
                            ("cancelled", "Cancelled"),
                        ],
                        default="scheduled",
                        max_length=10,
                    ),
                ),
                ("created_at", models.DateTimeField(auto_now_add=True)),
                ("updated_at", models.DateTimeField(auto_now=True)),
            ],
            options={"db_table": "events"},
        ),
    ]
