"""Unit tests for profile policies."""

from datetime import date
from uuid import uuid4

import pytest

from core.exceptions import InvalidInputError
from domain.entities.profile import Profile
from domain.services.policies import ensure_minimum_age, ensure_photo_capacity


class TestMinimumAge:
    def test_exactly_minimum_age_passes(self):
        ensure_minimum_age(date(2006, 6, 15), 18, today=date(2024, 6, 15))

    def test_one_day_short_fails(self):
        with pytest.raises(InvalidInputError) as exc_info:
            ensure_minimum_age(date(2006, 6, 16), 18, today=date(2024, 6, 15))

        assert exc_info.value.details["minimum_age"] == 18


class TestPhotoCapacity:
    def test_below_cap_passes(self):
        ensure_photo_capacity(Profile(user_id=uuid4(), photos=["a"] * 1), 6)

    def test_at_cap_fails(self):
        profile = Profile(user_id=uuid4(), photos=[str(i) for i in range(6)])

        with pytest.raises(InvalidInputError):
            ensure_photo_capacity(profile, 6)
