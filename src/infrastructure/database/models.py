"""SQLAlchemy ORM models."""

from datetime import date, datetime
from typing import Any
from uuid import UUID, uuid4

from sqlalchemy import (
    Boolean,
    CheckConstraint,
    Date,
    DateTime,
    Float,
    Integer,
    String,
    Text,
)
from sqlalchemy.dialects.postgresql import JSONB
from sqlalchemy.dialects.postgresql import UUID as PG_UUID
from sqlalchemy.orm import DeclarativeBase, Mapped, mapped_column


class Base(DeclarativeBase):
    """Base class for all ORM models."""

    pass


class ProfileModel(Base):
    """Dating profile model, one per user."""

    __tablename__ = "profiles"
    __table_args__ = (
        CheckConstraint(
            "height IS NULL OR (height >= 100 AND height <= 250)",
            name="ck_profiles_height_range",
        ),
        CheckConstraint(
            "weight IS NULL OR (weight >= 30 AND weight <= 300)",
            name="ck_profiles_weight_range",
        ),
    )

    id: Mapped[UUID] = mapped_column(
        PG_UUID(as_uuid=True),
        primary_key=True,
        default=uuid4,
    )
    user_id: Mapped[UUID] = mapped_column(
        PG_UUID(as_uuid=True),
        nullable=False,
        unique=True,
        index=True,
    )
    bio: Mapped[str | None] = mapped_column(Text)
    date_of_birth: Mapped[date | None] = mapped_column(Date)
    gender: Mapped[str | None] = mapped_column(String(32))
    height: Mapped[int | None] = mapped_column(Integer)
    weight: Mapped[int | None] = mapped_column(Integer)
    location: Mapped[str | None] = mapped_column(String(255))
    occupation: Mapped[str | None] = mapped_column(String(255))
    education: Mapped[str | None] = mapped_column(String(255))
    relationship_status: Mapped[str | None] = mapped_column(String(32))
    interests: Mapped[list[Any]] = mapped_column(JSONB, nullable=False, default=list)
    photos: Mapped[list[Any]] = mapped_column(JSONB, nullable=False, default=list)
    is_visible: Mapped[bool] = mapped_column(Boolean, nullable=False, default=True, index=True)
    is_complete: Mapped[bool] = mapped_column(Boolean, nullable=False, default=False)
    created_at: Mapped[datetime] = mapped_column(DateTime, default=datetime.utcnow)
    updated_at: Mapped[datetime] = mapped_column(DateTime, default=datetime.utcnow, index=True)


class PreferencesModel(Base):
    """Discovery, messaging and notification preferences, one per user."""

    __tablename__ = "preferences"
    __table_args__ = (
        CheckConstraint(
            "min_age >= 18 AND max_age <= 99 AND min_age <= max_age",
            name="ck_preferences_age_range",
        ),
        CheckConstraint(
            "max_distance > 0 AND max_distance <= 1000",
            name="ck_preferences_distance_range",
        ),
        CheckConstraint(
            "distance_unit IN ('KILOMETERS', 'MILES')",
            name="ck_preferences_distance_unit",
        ),
    )

    id: Mapped[UUID] = mapped_column(
        PG_UUID(as_uuid=True),
        primary_key=True,
        default=uuid4,
    )
    user_id: Mapped[UUID] = mapped_column(
        PG_UUID(as_uuid=True),
        nullable=False,
        unique=True,
        index=True,
    )
    preferred_genders: Mapped[list[Any]] = mapped_column(JSONB, nullable=False, default=list)
    min_age: Mapped[int] = mapped_column(Integer, nullable=False, default=18)
    max_age: Mapped[int] = mapped_column(Integer, nullable=False, default=99)
    max_distance: Mapped[float] = mapped_column(Float, nullable=False, default=50)
    distance_unit: Mapped[str] = mapped_column(String(16), nullable=False, default="KILOMETERS")
    preferred_interests: Mapped[list[Any]] = mapped_column(JSONB, nullable=False, default=list)
    deal_breakers: Mapped[list[Any]] = mapped_column(JSONB, nullable=False, default=list)

    show_only_verified_profiles: Mapped[bool] = mapped_column(Boolean, default=False)
    show_only_with_photos: Mapped[bool] = mapped_column(Boolean, default=True)
    allow_messages_from_matches: Mapped[bool] = mapped_column(Boolean, default=True)
    allow_messages_from_everyone: Mapped[bool] = mapped_column(Boolean, default=False)
    show_online_status: Mapped[bool] = mapped_column(Boolean, default=True)
    show_last_seen: Mapped[bool] = mapped_column(Boolean, default=True)
    push_notifications: Mapped[bool] = mapped_column(Boolean, default=True)
    email_notifications: Mapped[bool] = mapped_column(Boolean, default=True)
    match_notifications: Mapped[bool] = mapped_column(Boolean, default=True)
    message_notifications: Mapped[bool] = mapped_column(Boolean, default=True)
    like_notifications: Mapped[bool] = mapped_column(Boolean, default=True)

    created_at: Mapped[datetime] = mapped_column(DateTime, default=datetime.utcnow)
    updated_at: Mapped[datetime] = mapped_column(DateTime, default=datetime.utcnow)
