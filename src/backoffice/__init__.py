"""Restaurant back-office service: dashboard API and staff alert pipeline."""

__version__ = "1.0.0"
