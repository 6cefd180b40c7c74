"""modlink — project version-controlled module trees into a shared root."""

__version__ = "0.4.0"
