"""Domain layer of the care quality engine."""
