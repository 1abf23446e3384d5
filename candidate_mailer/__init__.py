"""Candidate Mailer package."""

__all__ = [
    "main",
    "config",
    "models",
    "db",
    "visibility",
    "content",
    "repository",
    "mailer",
    "composer",
    "exceptions",
]
