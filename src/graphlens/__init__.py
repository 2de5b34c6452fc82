"""Graph normalization, classification, filtering and search for graph views."""

__version__ = "0.1.0"
