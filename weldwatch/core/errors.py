"""Exceptions raised by weldwatch."""


class WeldwatchError(Exception):
    """Base exception for weldwatch."""


class SinkError(WeldwatchError):
    """The measurement store could not complete a request."""


class SinkUnavailableError(SinkError):
    """The store is unreachable or answered with a non-success status."""


class MalformedResponseError(SinkError):
    """The store answered with a payload of the wrong shape."""
