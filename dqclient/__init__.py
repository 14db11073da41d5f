"""Client for the data-quality analysis service."""

__version__ = "0.1.0"
