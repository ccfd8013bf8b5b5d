"""Pure compatibility and discovery rules.

Nothing here touches storage: callers hand in profiles and preferences that
were already loaded, and get back filtered lists in newest-updated-first order.
"""

from dataclasses import dataclass
from datetime import date
from typing import Iterable, Sequence

from domain.entities.preferences import Preferences
from domain.entities.profile import Profile
from domain.entities.search import ProfileSearchCriteria


@dataclass
class DiscoveryCandidate:
    """A candidate profile together with its owner's own preferences."""

    profile: Profile
    preferences: Preferences | None = None
    is_verified: bool = False


def newest_first(profiles: Iterable[Profile]) -> list[Profile]:
    """Sort by ``updated_at`` descending; ties keep their arrival order."""
    return sorted(profiles, key=lambda p: p.updated_at, reverse=True)


class DiscoveryEngine:
    """Decides which candidate profiles a viewer is eligible to see."""

    def __init__(self, require_mutual: bool = True) -> None:
        self._require_mutual = require_mutual

    # --- Criteria search ---

    def matches_criteria(
        self,
        profile: Profile,
        criteria: ProfileSearchCriteria,
        today: date | None = None,
    ) -> bool:
        """Check one profile against search criteria (visibility included)."""
        if not profile.is_visible:
            return False
        if criteria.exclude_user_id is not None and profile.user_id == criteria.exclude_user_id:
            return False

        if criteria.has_age_bounds:
            if profile.date_of_birth is None:
                return False
            earliest, latest = criteria.birth_date_bounds(today)
            if earliest is not None and profile.date_of_birth < earliest:
                return False
            if latest is not None and profile.date_of_birth > latest:
                return False

        if criteria.location:
            if not profile.location or criteria.location.lower() not in profile.location.lower():
                return False

        if criteria.interests and criteria.interests.isdisjoint(profile.interests):
            return False

        if criteria.gender is not None and profile.gender != criteria.gender:
            return False

        return True

    def search(
        self,
        profiles: Iterable[Profile],
        criteria: ProfileSearchCriteria,
        today: date | None = None,
    ) -> list[Profile]:
        """Filter ``profiles`` by ``criteria``, newest-updated first."""
        today = today or date.today()
        return newest_first(p for p in profiles if self.matches_criteria(p, criteria, today))

    # --- Preference compatibility ---

    def is_acceptable_to(
        self,
        preferences: Preferences,
        profile: Profile,
        today: date | None = None,
        is_verified: bool = False,
    ) -> bool:
        """Whether ``profile`` passes every filter in ``preferences``.

        A profile with no date of birth cannot be placed in an age range and
        is rejected. A profile with no gender only passes when the preferences
        carry no gender restriction. Visibility is checked by the callers.
        """
        age = profile.get_age(today)
        if age is None or not preferences.is_age_in_range(age):
            return False

        if profile.gender is None:
            if preferences.preferred_genders:
                return False
        elif not preferences.is_gender_preferred(profile.gender):
            return False

        if not preferences.has_interest_match(profile.interests):
            return False
        if preferences.has_deal_breaker(profile.interests):
            return False

        if preferences.show_only_with_photos and not profile.has_photos():
            return False
        if preferences.show_only_verified_profiles and not is_verified:
            return False

        return True

    def is_compatible(
        self,
        viewer_preferences: Preferences,
        candidate: DiscoveryCandidate,
        viewer_profile: Profile | None = None,
        viewer_is_verified: bool = False,
        today: date | None = None,
    ) -> bool:
        """Viewer-side check, plus the reciprocal check when mutual mode is on.

        Only visible, complete candidates other than the viewer qualify.

        In mutual mode a candidate with preferences is only compatible when the
        viewer's own profile is acceptable to them; without a viewer profile
        that cannot be shown, so the candidate is rejected. Candidates that
        have no preferences impose no reciprocal filter.
        """
        profile = candidate.profile
        if not profile.is_visible or profile.user_id == viewer_preferences.user_id:
            return False
        if not profile.is_complete:
            return False
        if not self.is_acceptable_to(
            viewer_preferences, profile, today, is_verified=candidate.is_verified
        ):
            return False

        if not self._require_mutual or candidate.preferences is None:
            return True
        if viewer_profile is None:
            return False
        return self.is_acceptable_to(
            candidate.preferences,
            viewer_profile,
            today,
            is_verified=viewer_is_verified,
        )

    def discover(
        self,
        viewer_preferences: Preferences,
        candidates: Sequence[DiscoveryCandidate],
        viewer_profile: Profile | None = None,
        viewer_is_verified: bool = False,
        today: date | None = None,
    ) -> list[Profile]:
        """Return the candidate profiles the viewer should see, newest-updated first."""
        today = today or date.today()
        visible = [
            c.profile
            for c in candidates
            if self.is_compatible(
                viewer_preferences,
                c,
                viewer_profile=viewer_profile,
                viewer_is_verified=viewer_is_verified,
                today=today,
            )
        ]
        return newest_first(visible)
