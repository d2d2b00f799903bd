"""Configure pytest fixtures and environment for preserveorder tests."""

import pytest

from preserveorder.core.config import reset_settings

SETTINGS_ENV = (
    "DEBUG",
    "LOG_JSON",
    "STRICT_VALIDATION",
    "CSV_DELIMITER",
    "CSV_ENCODING",
    "OUTPUT_FORMAT",
)


@pytest.fixture(autouse=True)
def isolated_settings(monkeypatch, tmp_path):
    """Run every test without inherited settings or a stray .env file."""
    for name in SETTINGS_ENV:
        monkeypatch.delenv(name, raising=False)
    monkeypatch.chdir(tmp_path)
    reset_settings()
    yield
    reset_settings()


@pytest.fixture
def write_csv(tmp_path):
    """Return a helper that writes CSV text to a file under tmp_path."""

    def _write(name: str, text: str):
        path = tmp_path / name
        path.write_text(text, encoding="utf-8")
        return path

    return _write


@pytest.fixture
def monthly_exports(write_csv):
    """Three exports whose headers overlap only partly."""
    return [
        write_csv("jan.csv", "id,name,email\n1,Ann,ann@example.com\n"),
        write_csv("feb.csv", "id,name,phone,email\n2,Bob,555-0100,bob@example.com\n"),
        write_csv("mar.csv", "id,email,created\n3,cy@example.com,2024-03-01\n"),
    ]
