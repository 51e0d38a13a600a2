"""In-memory profile store with a single "currently editing" slot."""

from collections.abc import Iterable

import structlog

from cputune.errors import DuplicateProfileError, UnknownProfileError
from cputune.models import CpuSettings, Profile

log = structlog.get_logger()

DEFAULT_PROFILE_NAME = "Default"

DEFAULT_PROFILES: tuple[Profile, ...] = (
    Profile(
        name=DEFAULT_PROFILE_NAME,
        cpu=CpuSettings(governor="powersave", energy_performance_preference="default"),
        description="Hardware defaults",
    ),
    Profile(
        name="Cool and breezy",
        cpu=CpuSettings(
            scaling_max_frequency=2_000_000_000,
            governor="powersave",
            energy_performance_preference="balance_power",
        ),
        description="Reduced maximum frequency for quiet operation",
    ),
    Profile(
        name="Powersave extreme",
        cpu=CpuSettings(
            online_cores=2,
            scaling_max_frequency=1_200_000_000,
            governor="powersave",
            energy_performance_preference="power",
        ),
        description="Lowest power draw",
    ),
)


class ProfileStore:
    """
    Holds default and custom profiles.

    At most one profile is being edited at a time; the slot stores its name
    and is cleared whenever that profile disappears.
    """

    def __init__(
        self,
        custom_profiles: Iterable[Profile] = (),
        default_profiles: Iterable[Profile] = DEFAULT_PROFILES,
    ) -> None:
        """Initialize the store with custom and default profiles."""
        self._default_profiles: list[Profile] = list(default_profiles)
        self._custom_profiles: list[Profile] = []
        self._editing: str | None = None
        for profile in custom_profiles:
            self.add_custom_profile(profile)

    def get_default_profiles(self) -> list[Profile]:
        """Built-in profiles."""
        return list(self._default_profiles)

    def get_custom_profiles(self) -> list[Profile]:
        """User-defined profiles."""
        return list(self._custom_profiles)

    def get_all_profiles(self) -> list[Profile]:
        """Default profiles followed by custom profiles."""
        return self._default_profiles + self._custom_profiles

    def get_default_profiles_for_table(self, show_default_profiles: bool) -> list[Profile]:
        """Default profiles listed alongside custom ones, without the base profile."""
        if not show_default_profiles:
            return []
        return [p for p in self._default_profiles if p.name != DEFAULT_PROFILE_NAME]

    def get_profile(self, name: str) -> Profile:
        """
        Look up a profile by name.

        Raises:
            UnknownProfileError: No profile has that name.
        """
        for profile in self.get_all_profiles():
            if profile.name == name:
                return profile
        raise UnknownProfileError(name)

    def add_custom_profile(self, profile: Profile) -> None:
        """
        Add a custom profile.

        Raises:
            DuplicateProfileError: A profile with the same name exists.
        """
        if any(p.name == profile.name for p in self.get_all_profiles()):
            raise DuplicateProfileError(profile.name)
        self._custom_profiles.append(profile)

    def remove_custom_profile(self, name: str) -> None:
        """Remove a custom profile, clearing the editing slot if it pointed there."""
        for i, profile in enumerate(self._custom_profiles):
            if profile.name == name:
                del self._custom_profiles[i]
                if self._editing == name:
                    self._editing = None
                return
        raise UnknownProfileError(name)

    def get_current_editing_profile(self) -> Profile | None:
        """The profile in the editing slot, if any."""
        if self._editing is None:
            return None
        try:
            return self.get_profile(self._editing)
        except UnknownProfileError:
            self._editing = None
            return None

    def set_current_editing_profile(self, name: str) -> bool:
        """Point the editing slot at ``name``. Returns False for unknown names."""
        try:
            self.get_profile(name)
        except UnknownProfileError:
            log.info("editing_profile_rejected", profile=name)
            return False
        self._editing = name
        return True

    def clear_current_editing_profile(self) -> None:
        """Empty the editing slot."""
        self._editing = None
