"""Selection of the profile being edited, with an unsaved-changes guard."""

import asyncio
import inspect
from collections.abc import Awaitable, Callable, Sequence
from dataclasses import dataclass
from enum import Enum, IntEnum

import structlog

from cputune.form import ProfileEditForm
from cputune.models import CpuSample, Profile
from cputune.store import ProfileStore

log = structlog.get_logger()

ConfirmationPrompt = Callable[[str, str, Sequence[str]], "int | Awaitable[int]"]


class Outcome(Enum):
    """Result of a ``select_for_edit`` request."""

    UNCHANGED = "unchanged"
    ABORTED = "aborted"
    REJECTED = "rejected"
    SELECTED = "selected"


class Choice(IntEnum):
    """Buttons of the discard-changes prompt, by index."""

    DISCARD = 0
    CANCEL = 1


DISCARD_PROMPT_TITLE = "Switching profile to edit"
DISCARD_PROMPT_MESSAGE = "Discard changes?"
DISCARD_PROMPT_BUTTONS = ("Discard", "Cancel")


@dataclass(slots=True, frozen=True)
class SwitchToken:
    """Pending result of a store switch request."""

    requested: str
    accepted: bool


class EditSessionController:
    """
    State machine for the currently edited profile.

    The controller is Idle when the store's editing slot is empty and
    Editing(name) otherwise. It only requests transitions; the store owns the
    slot. ``selected_profile`` is the name the UI should show as selected.
    """

    def __init__(
        self,
        store: ProfileStore,
        form: ProfileEditForm,
        confirm: ConfirmationPrompt,
        latest_sample: Callable[[], CpuSample | None],
    ) -> None:
        """Initialize the controller with its store, form, prompt and sample source."""
        self._store = store
        self._form = form
        self._confirm = confirm
        self._latest_sample = latest_sample
        self.selected_profile: str | None = None

    @property
    def form(self) -> ProfileEditForm:
        """The form this controller seeds."""
        return self._form

    def is_editing(self) -> bool:
        """Check if a profile is being edited."""
        return self._store.get_current_editing_profile() is not None

    def edit_profile(self) -> Profile | None:
        """The profile being edited, if any."""
        return self._store.get_current_editing_profile()

    async def select_for_edit(
        self, target_name: str, is_form_dirty: bool | None = None
    ) -> Outcome:
        """
        Switch the edit target to ``target_name``.

        When the form is dirty the user is asked to discard or cancel first.
        No state changes until that decision arrives.
        """
        current = self._store.get_current_editing_profile()
        if current is not None and current.name == target_name:
            return Outcome.UNCHANGED

        dirty = self._form.dirty if is_form_dirty is None else is_form_dirty
        if dirty and await self._ask_discard() != Choice.DISCARD:
            log.info("edit_switch_aborted", profile=target_name)
            return Outcome.ABORTED

        token = self.request_switch(target_name)
        if not token.accepted:
            # The store's final state is only read on a later loop turn
            await asyncio.sleep(0)
            self.resolve_switch(token)
            log.info("edit_switch_rejected", profile=target_name, selected=self.selected_profile)
            return Outcome.REJECTED

        self._seed_form(self._store.get_current_editing_profile())
        self.selected_profile = target_name
        log.info("edit_switch_selected", profile=target_name)
        return Outcome.SELECTED

    def request_switch(self, name: str) -> SwitchToken:
        """First phase: ask the store to point its editing slot at ``name``."""
        try:
            accepted = self._store.set_current_editing_profile(name)
        except Exception:
            log.exception("edit_switch_store_error", profile=name)
            accepted = False
        return SwitchToken(requested=name, accepted=bool(accepted))

    def resolve_switch(self, token: SwitchToken) -> str | None:
        """Second phase: reflect whatever the store actually ended up editing."""
        current = self._store.get_current_editing_profile()
        self.selected_profile = current.name if current is not None else None
        return self.selected_profile

    def cancel_editing(self) -> None:
        """Return to Idle and clear the form."""
        self._store.clear_current_editing_profile()
        self._form.reset()
        self.selected_profile = None

    async def _ask_discard(self) -> int:
        """Ask the user to discard or cancel. A failing prompt counts as cancel."""
        try:
            choice = self._confirm(
                DISCARD_PROMPT_TITLE, DISCARD_PROMPT_MESSAGE, DISCARD_PROMPT_BUTTONS
            )
            if inspect.isawaitable(choice):
                choice = await choice
        except Exception:
            log.exception("confirmation_prompt_failed")
            return Choice.CANCEL
        return choice

    def _seed_form(self, profile: Profile | None) -> None:
        """Mark the form pristine and fill it from the profile and the latest sample."""
        self._form.mark_pristine()
        if profile is None:
            return
        cpu = profile.cpu
        sample = self._latest_sample()
        first_core = sample.cores[0] if sample is not None and sample.cores else None

        online_cores = cpu.online_cores
        if online_cores is None and sample is not None:
            online_cores = sample.cpu_info.available_cores

        min_freq = cpu.scaling_min_frequency
        if min_freq is None and first_core is not None:
            min_freq = first_core.cpuinfo_min_freq

        max_freq = cpu.scaling_max_frequency
        if max_freq is None and first_core is not None:
            max_freq = first_core.cpuinfo_max_freq

        # No hardware fallback for governor and EPP
        self._form.seed(
            online_cores=online_cores,
            min_freq=min_freq,
            max_freq=max_freq,
            governor=cpu.governor,
            energy_performance_preference=cpu.energy_performance_preference,
        )
