"""Run external commands with a timeout and escalating termination."""

import logging
import os
import subprocess
import tempfile

from translate_bridge.models import ProcessResult

logger = logging.getLogger(__name__)

# Replaced in argv with the per-invocation scratch directory
WORKDIR_TOKEN = '{workdir}'

DEFAULT_KILL_GRACE_SECONDS = 5.0


class ProcessRunner:
    """
    Spawn a child process, feed it stdin, and collect stdout/stderr.

    Lifecycle of one invocation:
        Running -> (timeout) Terminating: SIGTERM, wait ``kill_grace_seconds``
                -> (still alive) Killed: SIGKILL, reap
                -> Exited

    Each invocation gets its own temporary directory, used as the child's
    working directory and removed on every exit path.
    """

    def __init__(self, kill_grace_seconds: float = DEFAULT_KILL_GRACE_SECONDS):
        self.kill_grace_seconds = kill_grace_seconds

    def run(self, argv, input_text=None, timeout=None, output_file=None) -> ProcessResult:
        """
        Run ``argv`` to completion.

        Args:
            argv: Command and arguments. ``{workdir}`` is replaced with the
                scratch directory path.
            input_text: Text written to the child's stdin (stdin is closed
                either way).
            timeout: Seconds before termination starts. None waits forever.
            output_file: Name of a file inside the scratch directory whose
                content is returned as ``output_text``.

        Returns:
            ProcessResult

        Raises:
            OSError: The command could not be spawned (e.g. not installed).
        """
        with tempfile.TemporaryDirectory(prefix='translate-bridge-') as workdir:
            args = [str(arg).replace(WORKDIR_TOKEN, workdir) for arg in argv]

            process = subprocess.Popen(
                args,
                cwd=workdir,
                env=os.environ.copy(),
                stdin=subprocess.PIPE,
                stdout=subprocess.PIPE,
                stderr=subprocess.PIPE,
                text=True,
                encoding='utf-8',
                errors='replace',
            )

            timed_out = False
            try:
                stdout, stderr = process.communicate(input=input_text or '', timeout=timeout)
            except subprocess.TimeoutExpired:
                timed_out = True
                logger.warning(f"{args[0]} exceeded {timeout}s, terminating pid={process.pid}")
                stdout, stderr = self._terminate(process)
            finally:
                if process.poll() is None:
                    # Interrupted while waiting (e.g. KeyboardInterrupt)
                    process.kill()
                    process.wait()

            output_text = None
            if output_file:
                output_text = _read_optional(os.path.join(workdir, output_file))

        return ProcessResult(
            exit_code=process.returncode,
            stdout_text=stdout or '',
            stderr_text=stderr or '',
            timed_out=timed_out,
            output_text=output_text,
        )

    def _terminate(self, process):
        process.terminate()
        try:
            return process.communicate(timeout=self.kill_grace_seconds)
        except subprocess.TimeoutExpired:
            logger.warning(f"pid={process.pid} ignored SIGTERM for {self.kill_grace_seconds}s, killing")
            process.kill()
            return process.communicate()


def _read_optional(path):
    try:
        with open(path, encoding='utf-8', errors='replace') as handle:
            return handle.read()
    except FileNotFoundError:
        # Codex may fail before writing its last message
        return None
