"""Storefront: checkout workflow and best-seller catalog for a music store."""

__version__ = "0.1.0"
