"""Health snapshot of the external codex CLI."""

from dataclasses import dataclass, field
from datetime import datetime, timezone


@dataclass
class HealthSnapshot:
    installed: bool = False
    logged_in: bool = False
    version: str | None = None
    message: str | None = None
    captured_at: datetime = field(default_factory=lambda: datetime.now(timezone.utc))

    @property
    def ok(self) -> bool:
        return self.installed and self.logged_in

    def __repr__(self):
        return f'<HealthSnapshot installed={self.installed} logged_in={self.logged_in}>'

    def to_dict(self):
        """Convert snapshot to the /health payload."""
        return {
            'ok': self.ok,
            'installed': self.installed,
            'loggedIn': self.logged_in,
            'version': self.version,
            'message': self.message,
            'capturedAt': self.captured_at.isoformat(),
        }
