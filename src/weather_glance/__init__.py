"""Current-weather normalization, request lifecycle, and presentation."""

__version__ = "0.1.0"
