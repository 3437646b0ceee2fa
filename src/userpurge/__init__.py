"""Admin-only cascading deletion of users and their data."""

__version__ = "0.1.0"
