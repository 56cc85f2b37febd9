"""GitHub issues to Firestore documents connector."""

__version__ = "0.1.0"
