from django.db import migrations, models


class Migration(migrations.Migration):

    dependencies = [
        ("auction_engine", "0001_initial"),
    ]

    operations = [
        migrations.CreateModel(
            name="ChangeCounter",
            fields=[
                ("table", models.CharField(max_length=40, primary_key=True, serialize=False)),
                ("version", models.BigIntegerField(default=0)),
            ],
            options={"db_table": "change_counters"},
        ),
    ]
