"""
tracker/errors.py
Exception taxonomy shared by the store, the endpoint and the client.
"""


class TrackerError(Exception):
    """Base class for all tracker failures."""


class IOFailure(TrackerError):
    """The document file could not be read or written, or holds invalid JSON."""


class TransportFailure(TrackerError):
    """The client could not reach the activities endpoint, or it answered with an error."""


class ValidationFailure(TrackerError):
    """Client-side rejection of an activity before submission."""
