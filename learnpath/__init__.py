"""Red Hat learning path generator API."""

__version__ = "1.0.0"
