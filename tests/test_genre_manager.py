import sys
import os

sys.path.insert(0, os.path.abspath(os.path.join(os.path.dirname(__file__), '..')))

from PySide6.QtTest import QTest

from hiyo_notes.core.models import GENRE_COLORS, Genre
from hiyo_notes.services.genre_manager import GenreManager
from hiyo_notes.settings import SettingsKeys, get_bool, open_settings, set_json


def _manager(store, **kwargs) -> GenreManager:
    gm = GenreManager(store, **kwargs)
    gm.initialize()
    return gm


def test_first_run_seeds_default(store):
    gm = _manager(store)

    assert [g.name for g in gm.genres] == ["default"]
    assert gm.current_genre.is_default
    assert gm.current_genre.color == "blue"
    assert get_bool(store, SettingsKeys.GENRES_INITIALIZED, False)


def test_genres_persist_across_instances(tmp_path, store):
    gm = _manager(store)
    work = gm.add_genre("work")
    gm.set_current_genre(work)
    store.sync()

    gm2 = _manager(open_settings(tmp_path / "settings.ini"))

    assert [g.name for g in gm2.genres] == ["default", "work"]
    assert gm2.current_genre.id == work.id


def test_unknown_stored_current_falls_back_to_default(store):
    gm = _manager(store)
    set_json(store, SettingsKeys.CURRENT_GENRE, Genre(name="ghost").to_dict())

    gm2 = _manager(store)

    assert gm2.current_genre.id == gm.default_genre.id


def test_malformed_store_reseeds_default(store):
    store.setValue(SettingsKeys.GENRES, "not json")

    gm = _manager(store)

    assert [g.name for g in gm.genres] == ["default"]


def test_missing_default_is_restored(store):
    set_json(store, SettingsKeys.GENRES, [Genre(name="work").to_dict()])

    gm = _manager(store)

    assert [g.name for g in gm.genres] == ["default", "work"]
    assert gm.default_genre.is_default


def test_duplicate_name_rejected_case_insensitive(store):
    gm = _manager(store)
    assert gm.add_genre("Work") is not None
    before = gm.genres

    assert gm.add_genre("work") is None
    assert gm.add_genre("  WORK ") is None
    assert gm.genres == before
    assert "already exists" in gm.error_message


def test_invalid_name_rejected(store):
    gm = _manager(store)

    assert gm.add_genre("a/b") is None
    assert len(gm.genres) == 1
    assert gm.error_message


def test_colors_first_unused_then_cycle(store):
    gm = _manager(store)

    added = [gm.add_genre(f"g{i}") for i in range(len(GENRE_COLORS))]

    assert [g.color for g in added[:6]] == list(GENRE_COLORS[1:])
    # every palette entry is taken now: count % palette size
    assert added[6].color == GENRE_COLORS[7 % len(GENRE_COLORS)]


def test_explicit_color_kept(store):
    gm = _manager(store)
    assert gm.add_genre("work", "red").color == "red"


def test_default_genre_cannot_be_deleted(store):
    gm = _manager(store)
    before = gm.genres

    assert gm.delete_genre(gm.default_genre) is False
    assert gm.genres == before
    assert "cannot be deleted" in gm.error_message


def test_delete_current_falls_back_to_default(store):
    gm = _manager(store)
    work = gm.add_genre("work")
    gm.set_current_genre(work)
    seen = []
    gm.current_genre_changed.connect(lambda genre: seen.append(genre))

    assert gm.delete_genre(work)

    assert gm.current_genre.is_default
    assert [g.name for g in seen] == ["default"]
    assert gm.get_genre("work") is None


def test_delete_other_keeps_selection(store):
    gm = _manager(store)
    work = gm.add_genre("work")
    home = gm.add_genre("home")
    gm.set_current_genre(home)

    gm.delete_genre(work)

    assert gm.current_genre.id == home.id


def test_set_current_rejects_foreign_genre(store):
    gm = _manager(store)

    assert gm.set_current_genre(Genre(name="stranger")) is False
    assert gm.current_genre.is_default


def test_get_genre_is_exact(store):
    gm = _manager(store)
    gm.add_genre("Work")

    assert gm.get_genre("Work") is not None
    assert gm.get_genre("work") is None


def test_repeated_error_gets_new_id(store):
    gm = _manager(store)
    gm.add_genre("work")
    events = []
    gm.error_changed.connect(lambda msg, eid: events.append((msg, eid)))

    gm.add_genre("work")
    gm.add_genre("work")

    assert len(events) == 2
    assert events[0][0] == events[1][0]
    assert events[0][1] != events[1][1]


def test_error_clears_after_timeout(store):
    gm = _manager(store, error_clear_ms=30)
    gm.delete_genre(gm.default_genre)
    assert gm.error_message

    QTest.qWait(200)

    assert gm.error_message == ""
    assert gm.error_id == ""


def test_clear_error_explicitly(store):
    gm = _manager(store)
    gm.delete_genre(gm.default_genre)

    gm.clear_error()

    assert gm.error_message == ""


def test_newer_error_restarts_clear_timer(store):
    gm = _manager(store, error_clear_ms=100)
    gm.delete_genre(gm.default_genre)
    QTest.qWait(60)

    gm.add_genre("default")
    QTest.qWait(60)

    # the first timer would have fired by now
    assert "already exists" in gm.error_message

    QTest.qWait(100)

    assert gm.error_message == ""


def test_reseeded_default_keeps_id_across_restarts(store):
    set_json(store, SettingsKeys.GENRES, [Genre(name="work").to_dict()])
    store.setValue(SettingsKeys.GENRES_INITIALIZED, True)

    first = _manager(store)
    second = _manager(store)

    assert second.default_genre.id == first.default_genre.id
    assert [g.name for g in second.genres] == ["default", "work"]


def test_reseeded_default_restores_current_selection(store):
    store.setValue(SettingsKeys.GENRES, "not json")
    store.setValue(SettingsKeys.GENRES_INITIALIZED, True)
    first = _manager(store)
    first.set_current_genre(first.default_genre)

    second = _manager(store)

    assert second.current_genre.id == first.default_genre.id
