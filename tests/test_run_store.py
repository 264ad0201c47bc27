"""Tests for run log storage."""

from __future__ import annotations

from datetime import datetime, timedelta

import pytest

from resume_customizer.logging import RunLog, RunStore


@pytest.fixture
def store(tmp_path):
    return RunStore(tmp_path / "runs.db")


class TestRunLog:
    def test_defaults(self):
        log = RunLog()
        assert log.id
        assert log.success
        assert not log.fallback_used
        assert log.input_tokens == 0
        assert RunLog().id != log.id


class TestRunStore:
    def test_save_and_get(self, store):
        log = RunLog(provider="OpenAI", style="general", input_tokens=900, output_tokens=400)
        store.save_log(log)

        [loaded] = store.get_logs()

        assert loaded.id == log.id
        assert loaded.provider == "OpenAI"
        assert loaded.input_tokens == 900

    def test_newest_first_with_limit(self, store):
        now = datetime.now()
        for i in range(5):
            store.save_log(RunLog(style=f"s{i}", timestamp=now + timedelta(seconds=i)))

        logs = store.get_logs(limit=2)

        assert [log.style for log in logs] == ["s4", "s3"]

    def test_stats(self, store):
        store.save_log(RunLog(input_tokens=100, output_tokens=50, elapsed_seconds=2.0))
        store.save_log(RunLog(fallback_used=True, error_kind="budget", elapsed_seconds=1.0))
        store.save_log(RunLog(fallback_used=True, error_kind="transport", elapsed_seconds=3.0))
        store.save_log(RunLog(fallback_used=True, error_kind="budget", elapsed_seconds=2.0))

        stats = store.get_stats()

        assert stats["total_runs"] == 4
        assert stats["fallback_runs"] == 3
        assert stats["fallback_rate"] == 75.0
        assert stats["total_input_tokens"] == 100
        assert stats["avg_elapsed_seconds"] == 2.0
        assert stats["error_kinds"] == {"budget": 2, "transport": 1}

    def test_empty_stats(self, store):
        stats = store.get_stats()
        assert stats["total_runs"] == 0
        assert stats["fallback_rate"] == 0.0
        assert stats["avg_elapsed_seconds"] is None
