"""End-to-end smoke test for the Monasca monitoring API."""

__version__ = "0.1.0"
