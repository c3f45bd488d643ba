"""Outcome of one external process invocation."""

from dataclasses import dataclass


@dataclass(frozen=True)
class ProcessResult:
    """Exit status and collected output of a finished child process.

    ``exit_code`` is negative when the child was ended by a signal (POSIX).
    ``timed_out`` is set only when the runner itself ended the child after
    the timeout expired, so a timeout is never confused with a plain
    non-zero exit. ``output_text`` holds the content of the requested output
    file, or None when the child never wrote it.
    """

    exit_code: int | None
    stdout_text: str = ''
    stderr_text: str = ''
    timed_out: bool = False
    output_text: str | None = None

    @property
    def succeeded(self) -> bool:
        return not self.timed_out and self.exit_code == 0

    def to_dict(self):
        return {
            'exitCode': self.exit_code,
            'stdoutText': self.stdout_text,
            'stderrText': self.stderr_text,
            'timedOut': self.timed_out,
        }
