"""cputune - Textual front-end for CPU state and profile editing."""

from collections.abc import Sequence

from textual.app import App, ComposeResult
from textual.containers import Container, Grid, Horizontal, Vertical
from textual.screen import ModalScreen
from textual.widgets import Button, DataTable, Footer, Input, Label, Static

from cputune.aggregator import format_frequency
from cputune.config import Config, load_config
from cputune.errors import ConfigError, CpuTuneError
from cputune.form import FIELD_NAMES, ProfileEditForm
from cputune.logs import configure_logging
from cputune.models import AggregatedView, CpuSample, Profile
from cputune.poller import PollLoop
from cputune.sampler import HardwareSampler
from cputune.session import EditSessionController, Outcome
from cputune.store import ProfileStore

FIELD_LABELS = {
    "online_cores": "Online cores",
    "min_freq": "Min frequency (Hz)",
    "max_freq": "Max frequency (Hz)",
    "governor": "Governor",
    "energy_performance_preference": "Energy preference",
}

_INTEGER_FIELDS = {"online_cores", "min_freq", "max_freq"}


def parse_field(name: str, text: str) -> int | str | None:
    """Convert an input's text to the form's value type; blank means unset."""
    text = text.strip()
    if not text:
        return None
    if name in _INTEGER_FIELDS:
        try:
            return int(text)
        except ValueError:
            return None
    return text


class DiscardChangesScreen(ModalScreen[int]):
    """Modal asking whether to discard unsaved edits. Dismisses with the button index."""

    DEFAULT_CSS = """
    DiscardChangesScreen {
        align: center middle;
    }

    #dialog {
        width: 50;
        height: auto;
        padding: 1 2;
        border: thick $primary;
        background: $surface;
    }

    #dialog-buttons {
        height: auto;
        margin-top: 1;
    }
    """

    def __init__(self, title: str, message: str, buttons: Sequence[str]) -> None:
        """Initialize the dialog with its title, message and button labels."""
        super().__init__()
        self._title = title
        self._message = message
        self._buttons = list(buttons)

    def compose(self) -> ComposeResult:
        """Compose the dialog."""
        with Vertical(id="dialog"):
            yield Label(f"[b]{self._title}[/b]")
            yield Label(self._message)
            with Horizontal(id="dialog-buttons"):
                for i, text in enumerate(self._buttons):
                    yield Button(text, id=f"choice-{i}", variant="primary" if i == 0 else "default")

    def on_button_pressed(self, event: Button.Pressed) -> None:
        """Dismiss with the index of the pressed button."""
        self.dismiss(int(event.button.id.removeprefix("choice-")))


class CpuSummary(Static):
    """Header widget listing the distinct scaling values across cores."""

    DEFAULT_CSS = """
    CpuSummary {
        height: auto;
        min-height: 7;
        padding: 1;
        background: $surface;
    }
    """

    def __init__(self, *args, **kwargs) -> None:
        """Initialize CpuSummary."""
        super().__init__(*args, **kwargs)
        self._view = AggregatedView()
        self._available_cores = 0

    def update_summary(self, sample: CpuSample, view: AggregatedView) -> None:
        """Update the summary from the latest sample and view."""
        self._view = view
        self._available_cores = sample.cpu_info.available_cores
        self.update(self.render_summary())

    def render_summary(self) -> str:
        """Build the summary text for the current view."""
        view = self._view
        if view.active_cores == 0:
            return "Loading CPU info..."
        return (
            f"Active cores:      {view.active_cores}/{self._available_cores}\n"
            f"Min frequency:     {', '.join(view.scaling_min_freqs)} MHz\n"
            f"Max frequency:     {', '.join(view.scaling_max_freqs)} MHz\n"
            f"Scaling driver:    {', '.join(view.scaling_drivers)}\n"
            f"Governor:          {', '.join(view.scaling_governors)}\n"
            f"Energy preference: {', '.join(p or '-' for p in view.energy_performance_preferences)}"
        )


class ProfileTable(Container):
    """Container for the list of editable profiles."""

    DEFAULT_CSS = """
    ProfileTable {
        width: 1fr;
        border: solid $primary;
    }
    """

    def compose(self) -> ComposeResult:
        """Compose the profile table."""
        yield DataTable(id="profile-table", cursor_type="row")

    def set_profiles(self, profiles: list[Profile]) -> None:
        """Replace the table rows with the given profiles."""
        table = self.query_one("#profile-table", DataTable)
        if not table.columns:
            table.add_column("Profile", key="name")
            table.add_column("Description", key="description")
        table.clear()
        for profile in profiles:
            table.add_row(profile.name, profile.description, key=profile.name)


class EditForm(Container):
    """Input fields mirroring the ProfileEditForm."""

    DEFAULT_CSS = """
    EditForm {
        width: 1fr;
        border: solid $secondary;
        padding: 0 1;
    }

    EditForm Grid {
        grid-size: 2;
        grid-columns: 20 1fr;
        height: auto;
    }
    """

    def compose(self) -> ComposeResult:
        """Compose the labelled inputs."""
        yield Label("Not editing", id="edit-title")
        with Grid():
            for name in FIELD_NAMES:
                yield Label(FIELD_LABELS[name])
                yield Input(
                    id=f"input-{name}",
                    type="integer" if name in _INTEGER_FIELDS else "text",
                    disabled=True,
                )

    def show(self, title: str, form: ProfileEditForm, editing: bool) -> None:
        """Show the form values and enable the inputs while editing."""
        self.query_one("#edit-title", Label).update(title)
        for name, value in form.values().items():
            field_input = self.query_one(f"#input-{name}", Input)
            field_input.value = "" if value is None else str(value)
            field_input.disabled = not editing


class CpuTuneApp(App):
    """Main cputune application."""

    TITLE = "cputune"
    SUB_TITLE = "CPU frequency profiles"

    CSS = """
    Screen {
        layout: vertical;
    }

    #cpu-summary {
        dock: top;
    }

    #main {
        height: 1fr;
    }
    """

    BINDINGS = [
        ("q", "quit", "Quit"),
        ("d", "toggle_defaults", "Default profiles"),
        ("escape", "stop_editing", "Stop editing"),
    ]

    def __init__(self, config: Config | None = None, sampler: HardwareSampler | None = None) -> None:
        """Initialize the CpuTuneApp."""
        super().__init__()
        self._config = config or Config()
        self._sampler = sampler or HardwareSampler(self._config.sysfs_root)
        self._poll_loop = PollLoop(self._sampler, poll_rate=self._config.poll_interval)
        self._store = ProfileStore(self._config.custom_profiles)
        self._form = ProfileEditForm()
        self._controller = EditSessionController(
            self._store,
            self._form,
            self._confirm,
            lambda: self._poll_loop.latest,
        )
        self._show_default_profiles = self._config.show_default_profiles

    @property
    def controller(self) -> EditSessionController:
        """The edit session controller."""
        return self._controller

    @property
    def poll_loop(self) -> PollLoop:
        """The hardware poll loop."""
        return self._poll_loop

    def compose(self) -> ComposeResult:
        """Compose the application layout."""
        yield CpuSummary(id="cpu-summary")
        with Horizontal(id="main"):
            yield ProfileTable()
            yield EditForm()
        yield Footer()

    def on_mount(self) -> None:
        """Fill the profile table and start polling when the app is mounted."""
        self._refresh_profiles()
        self._poll_loop.add_listener(self._on_sample)
        self._poll_loop.start()

    def on_unmount(self) -> None:
        """Stop polling when the app is unmounted."""
        self._poll_loop.stop()

    def visible_profiles(self) -> list[Profile]:
        """Custom profiles followed by the listed default profiles."""
        return self._store.get_custom_profiles() + self._store.get_default_profiles_for_table(
            self._show_default_profiles
        )

    def _on_sample(self, sample: CpuSample, view: AggregatedView) -> None:
        """Push a new sample to the header summary."""
        self.query_one("#cpu-summary", CpuSummary).update_summary(sample, view)

    def _refresh_profiles(self) -> None:
        """Rebuild the profile table."""
        self.query_one(ProfileTable).set_profiles(self.visible_profiles())

    def _refresh_form(self) -> None:
        """Redraw the edit form from the form state."""
        profile = self._controller.edit_profile()
        if profile is None:
            title = "Not editing"
        else:
            title = f"Editing [b]{profile.name}[/b]"
            if self._form.min_freq is not None and self._form.max_freq is not None:
                title += (
                    f"  ({format_frequency(self._form.min_freq)}"
                    f" - {format_frequency(self._form.max_freq)} MHz)"
                )
        self.query_one(EditForm).show(title, self._form, profile is not None)

    async def _confirm(self, title: str, message: str, buttons: Sequence[str]) -> int:
        """Show the discard-changes dialog and wait for the chosen button index."""
        return await self.push_screen_wait(DiscardChangesScreen(title, message, buttons))

    async def select_profile(self, name: str) -> Outcome:
        """Switch the edited profile and refresh the form."""
        outcome = await self._controller.select_for_edit(name)
        if outcome is Outcome.SELECTED:
            self._refresh_form()
        elif outcome is Outcome.REJECTED:
            self.notify(f"Cannot edit profile '{name}'", severity="warning")
            self._refresh_form()
        return outcome

    def on_data_table_row_selected(self, event: DataTable.RowSelected) -> None:
        """Start editing the selected profile."""
        name = event.row_key.value
        if name is not None:
            # The confirmation modal can only be awaited from a worker
            self.run_worker(self.select_profile(name), exclusive=True, group="select")

    def on_input_changed(self, event: Input.Changed) -> None:
        """Record a user edit in the form."""
        if event.input.id is None or not event.input.id.startswith("input-"):
            return
        name = event.input.id.removeprefix("input-")
        value = parse_field(name, event.value)
        # Programmatic fills echo back here with the value already in the form
        if value == getattr(self._form, name):
            return
        self._form.edit(name, value)

    def action_toggle_defaults(self) -> None:
        """Show or hide the default profiles in the table."""
        self._show_default_profiles = not self._show_default_profiles
        self._refresh_profiles()

    def action_stop_editing(self) -> None:
        """Stop editing and clear the form."""
        self._controller.cancel_editing()
        self._refresh_form()

    def action_quit(self) -> None:
        """Handle quit action with graceful cleanup."""
        self._poll_loop.stop()
        self.exit()


def main() -> None:
    """Entry point for the cputune application."""
    try:
        config = load_config()
    except ConfigError as exc:
        raise SystemExit(f"cputune: {exc}") from exc
    configure_logging(config.log_level)
    try:
        app = CpuTuneApp(config)
    except CpuTuneError as exc:
        raise SystemExit(f"cputune: {exc}") from exc
    app.run()


if __name__ == "__main__":
    main()
