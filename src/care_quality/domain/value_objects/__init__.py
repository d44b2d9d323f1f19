"""Domain value objects."""

from .incident_number import IncidentNumber
from .metrics_window import DEFAULT_WINDOW_DAYS, MetricsWindow

__all__ = [
    "IncidentNumber",
    "MetricsWindow",
    "DEFAULT_WINDOW_DAYS",
]
