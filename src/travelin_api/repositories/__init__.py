"""Data access layer for the Travelin API."""

from travelin_api.repositories import booking, favorite, poi, user

__all__ = [
    "booking",
    "favorite",
    "poi",
    "user",
]
