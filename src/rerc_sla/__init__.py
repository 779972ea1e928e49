"""Working-day SLA evaluation and academic-year reporting for RERC submissions."""

__version__ = "0.1.0"
