"""Employee attendance tracker: a small FastAPI service over a pooled SQL store."""

__version__ = "1.0.0"
