"""Wishlist trade scheduling and affordability engine."""

__version__ = "0.1.0"
