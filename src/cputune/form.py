"""Profile edit form state."""

from dataclasses import dataclass, fields

FIELD_NAMES = (
    "online_cores",
    "min_freq",
    "max_freq",
    "governor",
    "energy_performance_preference",
)


@dataclass(slots=True)
class ProfileEditForm:
    """
    The five editable CPU fields of a profile plus a dirty flag.

    ``edit`` models a user change and marks the form dirty; ``seed`` models
    a programmatic fill and leaves the flag alone.
    """

    online_cores: int | None = None
    min_freq: int | None = None  # Hz
    max_freq: int | None = None  # Hz
    governor: str | None = None
    energy_performance_preference: str | None = None
    dirty: bool = False

    def edit(self, name: str, value: object) -> None:
        """Change a single field as the user would."""
        if name not in FIELD_NAMES:
            raise KeyError(name)
        setattr(self, name, value)
        self.dirty = True

    def seed(self, **values: object) -> None:
        """Fill fields without touching the dirty flag."""
        unknown = set(values) - set(FIELD_NAMES)
        if unknown:
            raise KeyError(", ".join(sorted(unknown)))
        for name, value in values.items():
            setattr(self, name, value)

    def mark_pristine(self) -> None:
        """Clear the dirty flag."""
        self.dirty = False

    def reset(self) -> None:
        """Clear every field and the dirty flag."""
        for f in fields(self):
            setattr(self, f.name, f.default)

    def values(self) -> dict[str, object]:
        """Field values keyed by field name."""
        return {name: getattr(self, name) for name in FIELD_NAMES}
