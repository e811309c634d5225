import io

import pandas as pd
import pytest
from django.core.files.uploadedfile import SimpleUploadedFile

from auction_engine import importers
from auction_engine.exceptions import ValidationFailed
from auction_engine.models import AuctionStatus, Player
from auction_engine.services import TeamPlayersService

SHEET = (
    "Player Name,Role,Country,Base Price,Age\n"
    "Asha,Top Order,India,250000,24\n"
    "  Ben ,Fast Bowler,England,n/a,\n"
    "Asha,Keeper,India,1,30\n"
    ",Middle Order,India,1,22\n"
)


def test_normalize_columns_maps_aliases():
    df = pd.DataFrame(columns=[" Player Name ", "Country", "Cost", "Photo"])
    assert list(importers.normalize_columns(df).columns) == ["name", "nationality", "base_price", "image_url"]


def test_clean_player_frame(settings):
    df = importers.read_player_sheet(io.StringIO(SHEET), "players.csv")
    df = importers.clean_player_frame(df)

    assert list(df["name"]) == ["Asha", "Ben"]
    assert list(df["base_price"]) == [250_000, settings.AUCTION_DEFAULTS["base_price"]]


def test_clean_player_frame_needs_names():
    df = pd.DataFrame({"country": ["India"]})
    with pytest.raises(ValidationFailed):
        importers.clean_player_frame(importers.normalize_columns(df))


def test_rejects_unknown_file_type():
    with pytest.raises(ValidationFailed):
        importers.read_player_sheet(io.StringIO(SHEET), "players.txt")


@pytest.mark.django_db
def test_import_players():
    upload = SimpleUploadedFile("players.csv", SHEET.encode(), content_type="text/csv")
    assert importers.import_players(upload, upload.name) == 2

    asha = Player.objects.get(name="Asha")
    assert asha.position == "Top Order"
    assert asha.nationality == "India"
    assert asha.age == 24
    assert asha.category == "Batsman"
    assert asha.auction_status == AuctionStatus.PENDING
    assert Player.objects.get(name="Ben").age is None


def test_build_report_order(team, players):
    TeamPlayersService().assign_player_to_team(
        {"team_id": team.id, "player_id": players[1].id, "purchase_price": 300_000}
    )
    Player.objects.filter(pk=players[2].pk).update(auction_status=AuctionStatus.UNSOLD)
    Player.objects.filter(pk=players[3].pk).update(is_active=False)

    report = importers.build_report()
    assert list(report.columns) == importers.REPORT_COLUMNS
    rows = report[["Team", "Player", "Status", "Price"]].values.tolist()
    assert rows == [
        ["Chennai", "Ben", "SOLD", 300_000],
        ["UNSOLD POOL", "Chris", "UNSOLD", 0],
        ["WAITING LIST", "Asha", "PENDING", 0],
    ]


@pytest.mark.django_db
def test_build_report_when_empty():
    report = importers.build_report()
    assert report.empty
    assert list(report.columns) == importers.REPORT_COLUMNS
