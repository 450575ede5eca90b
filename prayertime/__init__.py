"""Prayer time scheduling and notification engine for desktop panels."""

__version__ = "1.0.0"
