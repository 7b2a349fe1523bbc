"""promptmap - prompt placeholder mapping and selection validation."""

__version__ = "0.1.0"
