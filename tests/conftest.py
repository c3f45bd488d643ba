"""
Pytest configuration and fixtures for testing the translation bridge.
"""

import json
import os
import sys
import pytest
from faker import Faker

# Add the parent directory to path for imports
sys.path.insert(0, os.path.abspath(os.path.join(os.path.dirname(__file__), '..')))

from translate_bridge import create_app
from translate_bridge.models import ProcessResult

fake = Faker()


def echo_translation(prompt):
    """Answer a translation prompt with strict JSON, prefixing each text."""
    items = json.loads(prompt.rsplit('\n', 1)[-1])
    return json.dumps({
        'results': [{'id': item['id'], 'translatedText': f"T:{item['text']}"} for item in items]
    }, ensure_ascii=False)


class FakeRunner:
    """Stands in for ProcessRunner; scripts the codex CLI without spawning it.

    ``exec_outputs`` is a queue consumed by ``codex exec`` calls. Each entry
    is a ProcessResult, a string (used as the last message), or a callable
    taking the prompt and returning either. When the queue is empty,
    ``echo_translation`` answers.
    """

    def __init__(self, installed=True, logged_in=True, exec_outputs=None):
        self.installed = installed
        self.logged_in = logged_in
        self.exec_outputs = list(exec_outputs or [])
        self.calls = []

    @property
    def exec_calls(self):
        return [call for call in self.calls if call['argv'][1] == 'exec']

    def run(self, argv, input_text=None, timeout=None, output_file=None):
        self.calls.append({
            'argv': list(argv),
            'input_text': input_text,
            'timeout': timeout,
            'output_file': output_file,
        })

        if argv[1] == '--version':
            if not self.installed:
                raise FileNotFoundError(2, 'No such file or directory', argv[0])
            return ProcessResult(exit_code=0, stdout_text='codex-cli 0.46.0\n')

        if argv[1:3] == ['login', 'status']:
            if self.logged_in:
                return ProcessResult(exit_code=0, stderr_text='Logged in using ChatGPT\n')
            return ProcessResult(exit_code=1, stderr_text='Not logged in\n')

        response = self.exec_outputs.pop(0) if self.exec_outputs else echo_translation
        if callable(response):
            response = response(input_text)
        if isinstance(response, str):
            response = ProcessResult(exit_code=0, output_text=response)
        return response


@pytest.fixture
def fake_runner():
    return FakeRunner()


@pytest.fixture
def app(fake_runner):
    """Create an application whose codex calls go to ``fake_runner``."""
    app = create_app('testing', runner=fake_runner)
    yield app


@pytest.fixture
def client(app):
    """Create test client for each test function."""
    return app.test_client()


@pytest.fixture
def service(app):
    return app.extensions['translation_service']
