"""API reference generator for Python class libraries."""

__version__ = "0.1.0"
