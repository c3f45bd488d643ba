"""Error taxonomy for the translation bridge.

Every failure that reaches a client carries a ``kind`` so callers can tell
a missing login apart from a misbehaving CLI without parsing messages:

- bad-request: nothing translatable in the request
- service-unavailable: codex CLI missing or not logged in (pre-flight)
- upstream-timeout: a codex run exceeded its timeout
- upstream-failure: codex exited non-zero without usable output
- parse-failure: no translation could be recovered from codex output
"""


class BridgeError(Exception):
    """Base class for errors rendered as JSON error responses."""

    kind = 'internal'
    status_code = 500

    def __init__(self, message, kind=None, status_code=None):
        super().__init__(message)
        self.message = message
        if kind is not None:
            self.kind = kind
        if status_code is not None:
            self.status_code = status_code

    def to_dict(self):
        return {
            'ok': False,
            'error': self.message,
            'kind': self.kind,
        }


class BadRequest(BridgeError):
    kind = 'bad-request'
    status_code = 400


class ServiceUnavailable(BridgeError):
    kind = 'service-unavailable'
    status_code = 503


class UpstreamTimeout(BridgeError):
    kind = 'upstream-timeout'
    status_code = 504


class UpstreamFailure(BridgeError):
    kind = 'upstream-failure'
    status_code = 502


class ParseFailure(BridgeError):
    kind = 'parse-failure'
    status_code = 502


def tail(text, max_lines=30):
    """Return the last ``max_lines`` lines of ``text`` (trimmed)."""
    if not text:
        return ''
    lines = text.strip().split('\n')
    return '\n'.join(lines[-max_lines:])
