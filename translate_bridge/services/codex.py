"""Thin wrapper around the ``codex`` command-line tool."""

import logging
from dataclasses import replace

from translate_bridge.services.process_runner import WORKDIR_TOKEN

logger = logging.getLogger(__name__)

LAST_MESSAGE_FILE = 'last-message.txt'

VERSION_TIMEOUT_SECONDS = 10
LOGIN_STATUS_TIMEOUT_SECONDS = 20
DEFAULT_EXEC_TIMEOUT_SECONDS = 120

# Noise codex prints when it cannot touch the user's PATH
NOISE_PREFIXES = (
    'WARNING: proceeding, even though we could not update PATH',
)


def sanitize_output(text) -> str:
    """Strip known codex noise lines and surrounding whitespace."""
    if not text:
        return ''
    lines = [line for line in text.split('\n') if not line.startswith(NOISE_PREFIXES)]
    return '\n'.join(lines).strip()


class CodexCli:
    """
    Invocations of the codex CLI, all routed through a ProcessRunner.

    - ``version()``: ``codex --version``
    - ``login_status()``: ``codex login status``
    - ``exec_translation(prompt, model)``: ``codex exec ... -`` with the
      prompt on stdin; the final message is written to a file in the
      runner's scratch directory.
    """

    def __init__(self, runner, binary='codex', exec_timeout=DEFAULT_EXEC_TIMEOUT_SECONDS):
        self.runner = runner
        self.binary = binary
        self.exec_timeout = exec_timeout

    def version(self):
        return self.runner.run([self.binary, '--version'], timeout=VERSION_TIMEOUT_SECONDS)

    def login_status(self):
        return self.runner.run([self.binary, 'login', 'status'], timeout=LOGIN_STATUS_TIMEOUT_SECONDS)

    def exec_translation(self, prompt: str, model: str = ''):
        """Run one translation prompt through ``codex exec``.

        Returns the runner's ProcessResult. ``output_text`` is the sanitized
        last message, or the sanitized stdout when codex wrote no message.
        """
        args = [
            self.binary,
            'exec',
            '--skip-git-repo-check',
            '--sandbox',
            'read-only',
            '-o',
            f'{WORKDIR_TOKEN}/{LAST_MESSAGE_FILE}',
        ]
        if model:
            args.extend(['-m', model])
        args.append('-')

        result = self.runner.run(
            args,
            input_text=prompt,
            timeout=self.exec_timeout,
            output_file=LAST_MESSAGE_FILE,
        )

        last_message = sanitize_output(result.output_text)
        if not last_message:
            logger.debug('codex wrote no last message, using stdout')

        return replace(
            result,
            stdout_text=sanitize_output(result.stdout_text),
            stderr_text=sanitize_output(result.stderr_text),
            output_text=last_message or sanitize_output(result.stdout_text),
        )
