"""Exceptions raised across the core/adapter boundary."""


class DataAccessError(Exception):
    """A backing store could not be reached or failed a query.

    Raised by store adapters and propagated by the core unrecovered;
    the surrounding infrastructure decides on retry or backoff.
    """
