from __future__ import annotations

import pytest
from pydantic import ValidationError

from core.config import Settings


def test_defaults_use_in_memory_sqlite(monkeypatch):
    monkeypatch.delenv("DATABASE_URL", raising=False)
    monkeypatch.delenv("TIMETABLE_ALLOW_OVERFILL", raising=False)
    s = Settings()
    assert s.database_url.startswith("sqlite")
    assert s.timetable_allow_overfill is False


def test_values_are_normalized():
    s = Settings(environment=" Production ", frontend_origin="https://school.example/", log_level="info")
    assert s.environment == "production"
    assert s.frontend_origin == "https://school.example"
    assert s.log_level == "INFO"


def test_overfill_flag_reads_env(monkeypatch):
    monkeypatch.setenv("TIMETABLE_ALLOW_OVERFILL", "true")
    assert Settings().timetable_allow_overfill is True


def test_bad_log_level_rejected():
    with pytest.raises(ValidationError):
        Settings(log_level="chatty")
