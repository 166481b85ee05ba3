"""Travelin API - points of interest, favorites and bookings."""

__version__ = "0.1.0"
