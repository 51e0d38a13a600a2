"""cputune - CPU frequency-scaling state and profile editing."""

__version__ = "0.1.0"
