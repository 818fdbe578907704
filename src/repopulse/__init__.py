"""repopulse — branch, commit and ticket activity from source-control repositories."""

__version__ = "0.1.0"
