import subprocess

import pytest

from keda_setup.log import set_no_color, set_verbose


class FakeRunner:
    """Stands in for subprocess.run, recording every command instead of executing it."""

    def __init__(self):
        self.commands = []
        self.calls = []
        self.failures = []

    def fail_on(self, *prefix):
        self.failures.append(list(prefix))

    def __call__(self, command, **kwargs):
        command = list(command)
        self.commands.append(command)
        self.calls.append((command, kwargs))

        returncode = 0
        for prefix in self.failures:
            if command[:len(prefix)] == prefix:
                returncode = 1

        if kwargs.get("capture_output"):
            if returncode == 0:
                return subprocess.CompletedProcess(command, returncode, stdout = "configured\n", stderr = "")
            return subprocess.CompletedProcess(command, returncode, stdout = "", stderr = "error: apply failed\n")
        return subprocess.CompletedProcess(command, returncode)


@pytest.fixture
def fake_run(monkeypatch):
    runner = FakeRunner()
    monkeypatch.setattr("keda_setup.shell.subprocess.run", runner)
    return runner


@pytest.fixture(autouse = True)
def reset_logging():
    set_no_color(True)
    yield
    set_no_color(False)
    set_verbose(False)
