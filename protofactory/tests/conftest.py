"""Unit tests configuration file."""

import pytest


def pytest_configure(config):
    """Disable verbose output when running tests."""
    terminal = config.pluginmanager.getplugin("terminal")
    if terminal:
        terminal.TerminalReporter.showfspath = False


@pytest.fixture
def write_protos(tmp_path):
    """Write schema files into a fresh directory and return its path."""

    def _write(files, directory="protos"):
        proto_dir = tmp_path / directory
        proto_dir.mkdir(parents=True, exist_ok=True)
        for name, text in files.items():
            (proto_dir / name).write_text(text, encoding="utf-8")
        return proto_dir

    return _write
