"""SAAD delivery tracker: project pipeline, metrics and AI-assisted intake."""

__version__ = "1.0.0"
