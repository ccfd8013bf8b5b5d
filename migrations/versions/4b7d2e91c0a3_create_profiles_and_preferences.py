"""create_profiles_and_preferences

Revision ID: 4b7d2e91c0a3
Revises:
Create Date: 2026-10-17 10:12:44.318207

"""
from typing import Sequence, Union

from alembic import op
import sqlalchemy as sa
from sqlalchemy.dialects import postgresql


# revision identifiers, used by Alembic.
revision: str = '4b7d2e91c0a3'
down_revision: Union[str, Sequence[str], None] = None
branch_labels: Union[str, Sequence[str], None] = None
depends_on: Union[str, Sequence[str], None] = None


def upgrade() -> None:
    """Create profiles and preferences tables."""
    op.create_table('profiles',
        sa.Column('id', sa.UUID(), nullable=False),
        sa.Column('user_id', sa.UUID(), nullable=False),
        sa.Column('bio', sa.Text(), nullable=True),
        sa.Column('date_of_birth', sa.Date(), nullable=True),
        sa.Column('gender', sa.String(length=32), nullable=True),
        sa.Column('height', sa.Integer(), nullable=True),
        sa.Column('weight', sa.Integer(), nullable=True),
        sa.Column('location', sa.String(length=255), nullable=True),
        sa.Column('occupation', sa.String(length=255), nullable=True),
        sa.Column('education', sa.String(length=255), nullable=True),
        sa.Column('relationship_status', sa.String(length=32), nullable=True),
        sa.Column('interests', postgresql.JSONB(), server_default='[]', nullable=False),
        sa.Column('photos', postgresql.JSONB(), server_default='[]', nullable=False),
        sa.Column('is_visible', sa.Boolean(), server_default=sa.true(), nullable=False),
        sa.Column('is_complete', sa.Boolean(), server_default=sa.false(), nullable=False),
        sa.Column('created_at', sa.DateTime(), nullable=False),
        sa.Column('updated_at', sa.DateTime(), nullable=False),
        sa.CheckConstraint(
            'height IS NULL OR (height >= 100 AND height <= 250)',
            name='ck_profiles_height_range',
        ),
        sa.CheckConstraint(
            'weight IS NULL OR (weight >= 30 AND weight <= 300)',
            name='ck_profiles_weight_range',
        ),
        sa.PrimaryKeyConstraint('id'),
    )
    op.create_index('ix_profiles_user_id', 'profiles', ['user_id'], unique=True)
    op.create_index('ix_profiles_is_visible', 'profiles', ['is_visible'])
    op.create_index('ix_profiles_updated_at', 'profiles', ['updated_at'])
    # GIN index for interest overlap queries
    op.execute(
        "CREATE INDEX ix_profiles_interests ON profiles USING gin (interests)"
    )

    op.create_table('preferences',
        sa.Column('id', sa.UUID(), nullable=False),
        sa.Column('user_id', sa.UUID(), nullable=False),
        sa.Column('preferred_genders', postgresql.JSONB(), server_default='[]', nullable=False),
        sa.Column('min_age', sa.Integer(), server_default='18', nullable=False),
        sa.Column('max_age', sa.Integer(), server_default='99', nullable=False),
        sa.Column('max_distance', sa.Float(), server_default='50', nullable=False),
        sa.Column('distance_unit', sa.String(length=16), server_default='KILOMETERS', nullable=False),
        sa.Column('preferred_interests', postgresql.JSONB(), server_default='[]', nullable=False),
        sa.Column('deal_breakers', postgresql.JSONB(), server_default='[]', nullable=False),
        sa.Column('show_only_verified_profiles', sa.Boolean(), server_default=sa.false(), nullable=False),
        sa.Column('show_only_with_photos', sa.Boolean(), server_default=sa.true(), nullable=False),
        sa.Column('allow_messages_from_matches', sa.Boolean(), server_default=sa.true(), nullable=False),
        sa.Column('allow_messages_from_everyone', sa.Boolean(), server_default=sa.false(), nullable=False),
        sa.Column('show_online_status', sa.Boolean(), server_default=sa.true(), nullable=False),
        sa.Column('show_last_seen', sa.Boolean(), server_default=sa.true(), nullable=False),
        sa.Column('push_notifications', sa.Boolean(), server_default=sa.true(), nullable=False),
        sa.Column('email_notifications', sa.Boolean(), server_default=sa.true(), nullable=False),
        sa.Column('match_notifications', sa.Boolean(), server_default=sa.true(), nullable=False),
        sa.Column('message_notifications', sa.Boolean(), server_default=sa.true(), nullable=False),
        sa.Column('like_notifications', sa.Boolean(), server_default=sa.true(), nullable=False),
        sa.Column('created_at', sa.DateTime(), nullable=False),
        sa.Column('updated_at', sa.DateTime(), nullable=False),
        sa.CheckConstraint(
            'min_age >= 18 AND max_age <= 99 AND min_age <= max_age',
            name='ck_preferences_age_range',
        ),
        sa.CheckConstraint(
            'max_distance > 0 AND max_distance <= 1000',
            name='ck_preferences_distance_range',
        ),
        sa.CheckConstraint(
            "distance_unit IN ('KILOMETERS', 'MILES')",
            name='ck_preferences_distance_unit',
        ),
        sa.PrimaryKeyConstraint('id'),
    )
    op.create_index('ix_preferences_user_id', 'preferences', ['user_id'], unique=True)


def downgrade() -> None:
    """Drop profiles and preferences tables."""
    op.drop_index('ix_preferences_user_id', table_name='preferences')
    op.drop_table('preferences')
    op.execute("DROP INDEX IF EXISTS ix_profiles_interests")
    op.drop_index('ix_profiles_updated_at', table_name='profiles')
    op.drop_index('ix_profiles_is_visible', table_name='profiles')
    op.drop_index('ix_profiles_user_id', table_name='profiles')
    op.drop_table('profiles')
