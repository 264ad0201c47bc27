"""Tests for the SQLite archive and settings store."""

from __future__ import annotations

import pytest

from resume_customizer.errors import ArchiveError
from resume_customizer.models.customization import DisplayConfig, TitleBar
from resume_customizer.storage.archive_store import DEFAULT_TARGET_PAGES, ArchiveStore


@pytest.fixture
def store(tmp_path):
    return ArchiveStore(tmp_path / "test.db")


class TestArchive:
    def test_save_and_list(self, store, mother_resume):
        first = store.save("Northwind", mother_resume)
        second = store.save("  Contoso  ", mother_resume)

        items = store.list()

        assert [item.id for item in items] == [first.id, second.id]
        assert items[1].label == "Contoso"
        assert items[0].data == mother_resume
        assert not any(item.is_current for item in items)

    def test_config_round_trip(self, store, mother_resume):
        config = DisplayConfig(title_bar=TitleBar(main="Data Analyst", sub="SQL | BI"))
        config.sections.show_certifications = False
        saved = store.save("Northwind", mother_resume, config)

        loaded = store.get(saved.id)

        assert loaded.config == config

    def test_blank_label_rejected(self, store, mother_resume):
        with pytest.raises(ArchiveError, match="blank"):
            store.save("   ", mother_resume)
        assert store.list() == []

    def test_set_current_is_exclusive(self, store, mother_resume):
        a = store.save("A", mother_resume)
        b = store.save("B", mother_resume)

        store.set_current(a.id)
        store.set_current(b.id)

        current = [item.id for item in store.list() if item.is_current]
        assert current == [b.id]
        assert store.get_current().id == b.id

    def test_no_current_initially(self, store, mother_resume):
        store.save("A", mother_resume)
        assert store.get_current() is None

    def test_unknown_item(self, store):
        with pytest.raises(ArchiveError, match="not found"):
            store.get(42)
        with pytest.raises(ArchiveError):
            store.set_current(42)
        with pytest.raises(ArchiveError):
            store.delete(42)

    def test_delete(self, store, mother_resume):
        a = store.save("A", mother_resume)
        b = store.save("B", mother_resume)
        store.delete(a.id)
        assert [item.id for item in store.list()] == [b.id]

    def test_persists_across_instances(self, tmp_path, mother_resume):
        path = tmp_path / "shared.db"
        ArchiveStore(path).save("A", mother_resume)
        assert [item.label for item in ArchiveStore(path).list()] == ["A"]


class TestSettings:
    def test_default_target_pages(self, store):
        assert store.get_target_pages() == DEFAULT_TARGET_PAGES == 2

    def test_set_target_pages(self, store):
        assert store.set_target_pages(3) == 3
        assert store.get_target_pages() == 3

    def test_target_pages_clamped(self, store):
        store.set_target_pages(0)
        assert store.get_target_pages() == 1
