"""Gesture and device-motion camera navigation for a celestial sphere view."""

__version__ = "0.1.0"
