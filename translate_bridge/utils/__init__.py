"""Shared utilities for the translation bridge.

This package contains the error taxonomy used by the services and
rendered by the route error handlers.
"""

from translate_bridge.utils.errors import (
    BridgeError,
    BadRequest,
    ServiceUnavailable,
    UpstreamTimeout,
    UpstreamFailure,
    ParseFailure,
    tail,
)

__all__ = [
    'BridgeError',
    'BadRequest',
    'ServiceUnavailable',
    'UpstreamTimeout',
    'UpstreamFailure',
    'ParseFailure',
    'tail',
]
