"""Initial schema

Revision ID: 001_initial_schema
Revises:
Create Date: 2026-10-19

Adds:
- cities table (reference cities, created lazily on first refresh)
- businesses table with tri-state amenity flags and practice areas
- hour_windows table (single-day secondary-hours windows)
"""
from typing import Sequence, Union

from alembic import op
import sqlalchemy as sa


# revision identifiers, used by Alembic.
revision: str = '001_initial_schema'
down_revision: Union[str, None] = None
branch_labels: Union[str, Sequence[str], None] = None
depends_on: Union[str, Sequence[str], None] = None


AMENITY_COLUMNS = [
    'accepts_credit_cards',
    'accepts_debit_cards',
    'cash_only',
    'accepts_nfc',
    'free_parking_lot',
    'paid_parking_lot',
    'free_street_parking',
    'valet_parking',
    'free_garage_parking',
    'paid_garage_parking',
    'wheelchair_accessible_parking',
    'wheelchair_accessible_entrance',
    'wheelchair_accessible_restroom',
    'wheelchair_accessible_seating',
]


def upgrade() -> None:
    op.create_table(
        'cities',
        sa.Column('id', sa.Integer(), primary_key=True, autoincrement=True),
        sa.Column('slug', sa.String(100), nullable=False),
        sa.Column('name', sa.String(100), nullable=False),
        sa.Column('state_code', sa.String(2), nullable=False),
        sa.Column('state_name', sa.String(100), nullable=False),
        sa.Column('state_slug', sa.String(100), nullable=False),
        sa.Column('latitude', sa.Float(), nullable=False),
        sa.Column('longitude', sa.Float(), nullable=False),
        sa.Column('population', sa.Integer(), nullable=False, server_default='0'),
        sa.Column('timezone', sa.String(50), nullable=False, server_default='America/New_York'),
        sa.Column('created_at', sa.DateTime(), server_default=sa.func.now()),
    )
    op.create_index('ix_cities_slug', 'cities', ['slug'], unique=True)
    op.create_index('ix_cities_state_slug', 'cities', ['state_slug'])

    op.create_table(
        'businesses',
        sa.Column('id', sa.Integer(), primary_key=True, autoincrement=True),
        sa.Column('source_id', sa.String(255), nullable=False, unique=True),
        sa.Column('city_id', sa.Integer(), sa.ForeignKey('cities.id', ondelete='CASCADE'), nullable=False),
        sa.Column('display_name', sa.String(255), nullable=False),
        sa.Column('formatted_address', sa.String(500), nullable=True),
        sa.Column('short_address', sa.String(255), nullable=True),
        sa.Column('primary_type', sa.String(100), nullable=True),
        sa.Column('primary_type_display_name', sa.String(100), nullable=True),
        sa.Column('latitude', sa.Float(), nullable=False, server_default='0'),
        sa.Column('longitude', sa.Float(), nullable=False, server_default='0'),
        sa.Column('google_maps_uri', sa.String(500), nullable=True),
        sa.Column('website_uri', sa.String(500), nullable=True),
        *[sa.Column(name, sa.Boolean(), nullable=True) for name in AMENITY_COLUMNS],
        sa.Column('practice_areas', sa.JSON(), nullable=False),
        sa.Column('last_refreshed_at', sa.DateTime(), nullable=True),
        sa.Column('created_at', sa.DateTime(), server_default=sa.func.now()),
        sa.Column('updated_at', sa.DateTime(), server_default=sa.func.now()),
    )
    op.create_index('idx_businesses_city_refresh', 'businesses', ['city_id', 'last_refreshed_at'])

    op.create_table(
        'hour_windows',
        sa.Column('id', sa.Integer(), primary_key=True, autoincrement=True),
        sa.Column('business_id', sa.Integer(), sa.ForeignKey('businesses.id', ondelete='CASCADE'), nullable=False),
        sa.Column('category', sa.String(100), nullable=False),
        sa.Column('day_of_week', sa.Integer(), nullable=False),
        sa.Column('open_hour', sa.Integer(), nullable=False),
        sa.Column('open_minute', sa.Integer(), nullable=False, server_default='0'),
        sa.Column('close_hour', sa.Integer(), nullable=False),
        sa.Column('close_minute', sa.Integer(), nullable=False, server_default='0'),
    )
    op.create_index('idx_hour_windows_business_day', 'hour_windows', ['business_id', 'day_of_week'])


def downgrade() -> None:
    op.drop_index('idx_hour_windows_business_day', table_name='hour_windows')
    op.drop_table('hour_windows')
    op.drop_index('idx_businesses_city_refresh', table_name='businesses')
    op.drop_table('businesses')
    op.drop_index('ix_cities_state_slug', table_name='cities')
    op.drop_index('ix_cities_slug', table_name='cities')
    op.drop_table('cities')
