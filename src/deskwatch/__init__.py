"""deskwatch - Zammad ticket change notifications."""

__version__ = "0.1.0"
