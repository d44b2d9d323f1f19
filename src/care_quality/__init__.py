"""Care Quality Engine: incident tracking and caregiver quality metrics."""

__version__ = "0.1.0"
