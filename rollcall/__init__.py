"""Journal club rollcall: nag owners of stale records, archive the unresponsive."""

__version__ = "1.0.0"
