"""Venue directory map pipeline: bulk venue loading and viewport filtering."""

__version__ = "0.1.0"
