"""Parse k6 summary output and compare results across environments."""

__version__ = "0.1.0"
