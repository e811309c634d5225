import logging

import pandas as pd
from django.conf import settings
from django.db import transaction

from .exceptions import ValidationFailed
from .models import AuctionStatus, Player, TeamPlayer
from .realtime import notify_change

logger = logging.getLogger(__name__)

COLUMN_ALIASES = {
    'name': ['player', 'player name', 'fullname', 'name', 'full name'],
    'category': ['category', 'cat', 'group', 'tier', 'type'],
    'position': ['position', 'role', 'speciality', 'playing role'],
    'subcategory': ['subcategory', 'sub category', 'style'],
    'nationality': ['nationality', 'country', 'nation'],
    'age': ['age'],
    'base_price': ['baseprice', 'base price', 'base_price', 'cost', 'starting bid', 'price', 'points', 'base'],
    'image_url': ['image', 'photo', 'pic', 'url', 'image link', 'image_url'],
}

REPORT_COLUMNS = [
    'Team', 'Player', 'Price', 'Status',
    'Position', 'Category', 'Nationality', 'Base_Price',
]


def normalize_columns(df):
    # lowercase, strip spaces, then map the first alias found onto each field
    df.columns = df.columns.astype(str).str.strip().str.lower()
    logger.debug("Detected columns -> %s", list(df.columns))

    new_cols = {}
    for db_field, aliases in COLUMN_ALIASES.items():
        for alias in aliases:
            if alias in df.columns:
                new_cols[alias] = db_field
                break

    df = df.rename(columns=new_cols)
    logger.debug("Mapped columns -> %s", list(df.columns))
    return df


def read_player_sheet(upload, filename):
    if filename.lower().endswith('.csv'):
        df = pd.read_csv(upload)
    elif filename.lower().endswith(('.xls', '.xlsx')):
        df = pd.read_excel(upload)
    else:
        raise ValidationFailed("Upload a .csv or .xlsx file")
    return normalize_columns(df)


def clean_player_frame(df):
    if 'name' not in df.columns:
        raise ValidationFailed("The sheet must have a 'Name' column.")

    df = df.dropna(subset=['name']).copy()
    df['name'] = df['name'].astype(str).str.strip()
    df = df[df['name'] != '']
    df = df.drop_duplicates(subset=['name'], keep='first').copy()

    default_price = settings.AUCTION_DEFAULTS['base_price']
    if 'base_price' in df.columns:
        # text and blanks fall back to the default price
        df['base_price'] = pd.to_numeric(df['base_price'], errors='coerce')
        df['base_price'] = df['base_price'].fillna(default_price).astype(int)
    else:
        df['base_price'] = default_price

    if 'age' in df.columns:
        df['age'] = pd.to_numeric(df['age'], errors='coerce')
    return df


def _text(row, key, default=''):
    value = row.get(key, default)
    if pd.isna(value):
        return default
    return str(value).strip()


def import_players(upload, filename):
    """Bulk-create players from an uploaded sheet; returns the number created."""
    df = clean_player_frame(read_player_sheet(upload, filename))

    players = []
    for _, row in df.iterrows():
        age = row.get('age')
        players.append(Player(
            name=row['name'],
            category=_text(row, 'category', 'Batsman') or 'Batsman',
            position=_text(row, 'position', 'Middle Order') or 'Middle Order',
            subcategory=_text(row, 'subcategory'),
            nationality=_text(row, 'nationality'),
            image_url=_text(row, 'image_url'),
            age=None if age is None or pd.isna(age) else int(age),
            base_price=int(row['base_price']),
            auction_status=AuctionStatus.PENDING,
        ))

    with transaction.atomic():
        Player.objects.bulk_create(players)
    # bulk_create skips post_save
    notify_change('players')
    logger.info("Imported %s players from %s", len(players), filename)
    return len(players)


def build_report():
    """Final report: sold players grouped by team, then unsold, then still pending."""
    sold_data = [
        {
            'Team': tp.team.name,
            'Player': tp.player.name,
            'Price': tp.purchase_price,
            'Position': tp.player.position,
            'Category': tp.player.category,
            'Nationality': tp.player.nationality,
            'Base_Price': tp.player.base_price,
        }
        for tp in TeamPlayer.objects.select_related('team', 'player').order_by('team__name', 'player__name')
    ]
    unsold_data = list(
        Player.objects.filter(auction_status=AuctionStatus.UNSOLD).order_by('name')
        .values('name', 'position', 'category', 'nationality', 'base_price')
    )
    remaining_data = list(
        Player.objects.filter(auction_status__in=[AuctionStatus.PENDING, AuctionStatus.CURRENT])
        .filter(is_active=True).order_by('name')
        .values('name', 'position', 'base_price')
    )
    rename = {
        'name': 'Player', 'position': 'Position', 'category': 'Category',
        'nationality': 'Nationality', 'base_price': 'Base_Price',
    }

    df_sold = pd.DataFrame(sold_data)
    df_unsold = pd.DataFrame(unsold_data).rename(columns=rename)
    df_remaining = pd.DataFrame(remaining_data).rename(columns=rename)

    if not df_sold.empty:
        df_sold['Status'] = 'SOLD'

    if not df_unsold.empty:
        df_unsold['Team'] = 'UNSOLD POOL'
        df_unsold['Price'] = 0
        df_unsold['Status'] = 'UNSOLD'

    if not df_remaining.empty:
        df_remaining['Team'] = 'WAITING LIST'
        df_remaining['Price'] = 0
        df_remaining['Status'] = 'PENDING'

    final_df = pd.concat([df_sold, df_unsold, df_remaining], ignore_index=True)
    for col in REPORT_COLUMNS:
        if col not in final_df.columns:
            final_df[col] = ''
    return final_df[REPORT_COLUMNS].fillna('')
