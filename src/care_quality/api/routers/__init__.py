"""API routers."""

from . import events, health, jobs, metrics

__all__ = ["events", "health", "jobs", "metrics"]
