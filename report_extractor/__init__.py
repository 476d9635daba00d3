"""Financial report extraction: PDF to normalized company profiles and metrics."""

__version__ = "0.1.0"
