"""Thermal receipt rendering and ESC/POS printing."""

__version__ = "1.0.0"
