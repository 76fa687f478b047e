"""
Profile store — the single in-process owner of the user's dietary profile.

The store is hydrated once from a local JSON document and written back on
every mutation. Readers either pull `store.profile` or subscribe to be told
about each change. Mutations that would not change the profile (adding an
allergy twice, removing one that is absent) are no-ops: nothing is written
and nobody is notified.
"""

from __future__ import annotations

import json
import logging
from pathlib import Path
from typing import Any, Callable, Optional

from pydantic import ValidationError

from safebyte.schemas.profile import ProfileUpdate, Severity, UserProfile
from safebyte.services.safety_filter import normalize_allergen
from safebyte.utils.allergy_data import DEFAULT_SEVERITY

logger = logging.getLogger(__name__)

# Key under which the profile lives in the local document
PROFILE_KEY = "userProfile"

ProfileListener = Callable[[UserProfile], None]


class LocalProfileStorage:
    """
    JSON document on disk holding the profile under PROFILE_KEY.
    Corrupt or unreadable data is logged and treated as absent.
    """

    def __init__(self, path: str | Path) -> None:
        self.path = Path(path)

    def read(self) -> Optional[dict[str, Any]]:
        if not self.path.exists():
            return None
        try:
            document = json.loads(self.path.read_text(encoding="utf-8"))
        except (OSError, ValueError) as exc:
            logger.error("Failed to load profile from %s: %s", self.path, exc)
            return None
        if not isinstance(document, dict) or not isinstance(document.get(PROFILE_KEY), dict):
            logger.error("Profile document at %s has no %r object", self.path, PROFILE_KEY)
            return None
        return document[PROFILE_KEY]

    def write(self, profile: UserProfile) -> None:
        self.path.parent.mkdir(parents=True, exist_ok=True)
        document = {PROFILE_KEY: profile.model_dump(by_alias=True)}
        self.path.write_text(json.dumps(document, indent=2), encoding="utf-8")

    def clear(self) -> None:
        self.path.unlink(missing_ok=True)


class ProfileStore:
    """Injectable container for the profile with an explicit mutation API."""

    def __init__(self, storage: LocalProfileStorage) -> None:
        self._storage = storage
        self._profile = UserProfile()
        self._listeners: list[ProfileListener] = []

    # ── Lifecycle ────────────────────────────────────────────────────────────

    def hydrate(self) -> UserProfile:
        """Load the persisted profile, falling back to defaults on missing or bad data."""
        raw = self._storage.read()
        profile = UserProfile()
        if raw is not None:
            try:
                profile = UserProfile.model_validate(raw)
            except ValidationError as exc:
                logger.error("Persisted profile is invalid, using defaults: %s", exc)
        self._profile = profile
        return self.profile

    @property
    def profile(self) -> UserProfile:
        """A copy of the current profile; mutate through the store only."""
        return self._profile.model_copy(deep=True)

    def subscribe(self, listener: ProfileListener) -> Callable[[], None]:
        """Register a change listener. Returns a callable that unsubscribes it."""
        self._listeners.append(listener)

        def _unsubscribe() -> None:
            if listener in self._listeners:
                self._listeners.remove(listener)

        return _unsubscribe

    # ── Mutations ────────────────────────────────────────────────────────────

    def add_allergy(self, allergy: str, severity: Severity = DEFAULT_SEVERITY) -> UserProfile:
        """Add an allergy with its severity; an allergy already listed is left untouched."""
        allergy = allergy.strip()
        current = self.profile
        if not allergy or self._find_allergy(current, allergy) is not None:
            return current
        current.allergies.append(allergy)
        current.severity_levels[allergy] = severity
        return self._commit(current)

    def remove_allergy(self, allergy: str) -> UserProfile:
        """Remove an allergy and its severity; absent allergies are a no-op."""
        current = self.profile
        existing = self._find_allergy(current, allergy)
        if existing is None:
            return current
        current.allergies.remove(existing)
        current.severity_levels.pop(existing, None)
        return self._commit(current)

    def set_severity(self, allergy: str, severity: Severity) -> UserProfile:
        """Change the severity of a listed allergy. Raises KeyError when it is not listed."""
        current = self.profile
        existing = self._find_allergy(current, allergy)
        if existing is None:
            raise KeyError(allergy)
        current.severity_levels[existing] = severity
        return self._commit(current)

    def add_diet_tag(self, tag: str) -> UserProfile:
        tag = tag.strip()
        current = self.profile
        if not tag or tag in current.diet_tags:
            return current
        current.diet_tags.append(tag)
        return self._commit(current)

    def remove_diet_tag(self, tag: str) -> UserProfile:
        current = self.profile
        if tag not in current.diet_tags:
            return current
        current.diet_tags.remove(tag)
        return self._commit(current)

    def update(self, updates: ProfileUpdate) -> UserProfile:
        """Replace only the fields present in `updates`."""
        merged = self.profile.model_dump()
        merged.update(updates.model_dump(exclude_unset=True, exclude_none=True))
        return self._commit(UserProfile.model_validate(merged))

    def reset(self) -> UserProfile:
        """Clear back to defaults and delete the persisted document."""
        self._storage.clear()
        self._profile = UserProfile()
        profile = self.profile
        self._notify(profile)
        return profile

    # ── Internals ────────────────────────────────────────────────────────────

    @staticmethod
    def _find_allergy(profile: UserProfile, allergy: str) -> Optional[str]:
        """Stored spelling of `allergy`, compared after normalisation."""
        wanted = normalize_allergen(allergy)
        for existing in profile.allergies:
            if normalize_allergen(existing) == wanted:
                return existing
        return None

    def _commit(self, profile: UserProfile) -> UserProfile:
        if profile == self._profile:
            return profile
        self._storage.write(profile)
        self._profile = profile
        snapshot = self.profile
        self._notify(snapshot)
        return snapshot

    def _notify(self, profile: UserProfile) -> None:
        for listener in list(self._listeners):
            try:
                listener(profile)
            except Exception:
                logger.exception("Profile listener %r failed", listener)
