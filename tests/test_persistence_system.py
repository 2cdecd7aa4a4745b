import json

import pytest

from samegame.components.game_state import LifecycleState
from samegame.events.bus import EventKind
from samegame.systems.persistence_system import PersistenceSystem, build_scoreboard
from tests.helpers import RecordingObserver, make_engine, uniform


@pytest.fixture
def paths(tmp_path):
    return tmp_path / "save.json", tmp_path / "scores.json"


def attach(engine, paths):
    save_path, scores_path = paths
    persistence = PersistenceSystem(engine, save_path=save_path, scores_path=scores_path)
    engine.add_observer(persistence)
    observer = RecordingObserver()
    engine.add_observer(observer)
    return persistence, observer


def texts(observer):
    return [event.message for event in observer.events if event.kind == EventKind.TEXT_MESSAGE]


def test_new_round_is_saved(paths):
    engine = make_engine([[0, 0, 1], [1, 0, 1]], start=False)
    persistence, _ = attach(engine, paths)
    assert not persistence.has_save
    engine.new_game()
    assert persistence.has_save
    saved = json.loads(paths[0].read_text(encoding="utf-8"))
    assert saved["grid"]["values"] == [[0, 0, 1], [1, 0, 1]]
    assert saved["state"]["lifecycle"] == "ONGOING"


def test_each_move_updates_save(paths):
    engine = make_engine([[0, 0, 0, 1], [1, 1, 2, 2], [0, 2, 2, 1]], start=False)
    attach(engine, paths)
    engine.new_game()
    engine.select_at(0, 0)
    engine.validate_selection()
    saved = json.loads(paths[0].read_text(encoding="utf-8"))
    assert saved["state"]["score"] == 1
    assert saved["grid"]["values"][0] == [1]


def test_load_restores_saved_round(paths):
    first = make_engine([[0, 0, 0, 1], [1, 1, 2, 2], [0, 2, 2, 1]], start=False)
    attach(first, paths)
    first.new_game()
    first.select_at(0, 0)
    first.validate_selection()

    second = make_engine([[3]], start=False)
    _, observer = attach(second, paths)
    second.request_load()
    assert second.state == LifecycleState.ONGOING
    assert second.score == 1
    assert second.tiles() == first.tiles()
    assert observer.kinds == [EventKind.TEXT_MESSAGE, EventKind.ROUND_RESUMED, EventKind.LOAD_REQUESTED]
    assert texts(observer) == ["Game loaded!\n"]


def test_load_without_save(paths):
    engine = make_engine([[0, 0]], start=False)
    persistence, observer = attach(engine, paths)
    assert persistence.load_game() is False
    assert texts(observer) == ["No game to load.\n"]
    assert engine.state == LifecycleState.PRESTART


@pytest.mark.parametrize("content", ["not json", "[1, 2]", '{"version": 1}'])
def test_load_corrupt_save(paths, content):
    paths[0].write_text(content, encoding="utf-8")
    engine = make_engine([[0, 0]], start=False)
    persistence, observer = attach(engine, paths)
    assert persistence.load_game() is False
    assert texts(observer) == ["Error while loading game.\n"]
    assert engine.state == LifecycleState.PRESTART
    assert not engine.has_grid


def test_win_records_score_and_drops_save(paths):
    engine = make_engine(uniform(2, 3), start=False)
    persistence, _ = attach(engine, paths)
    engine.new_game()
    engine.select_at(0, 0)
    engine.validate_selection()
    assert engine.state == LifecycleState.WON
    assert not persistence.has_save
    assert json.loads(paths[1].read_text(encoding="utf-8")) == [16]

    engine.reset()
    engine.select_at(1, 1)
    engine.validate_selection()
    persistence.add_score(40)
    assert persistence.load_scores() == [40, 16, 16]


def test_loss_drops_save_without_score(paths):
    engine = make_engine([[0, 0], [1, 2]], start=False)
    persistence, _ = attach(engine, paths)
    engine.new_game()
    assert persistence.has_save
    engine.select_at(0, 0)
    engine.validate_selection()
    assert engine.state == LifecycleState.LOST
    assert not persistence.has_save
    assert not paths[1].exists()


def test_scoreboard_messages(paths):
    engine = make_engine([[0, 0]], start=False)
    persistence, observer = attach(engine, paths)
    engine.request_scoreboard()
    persistence.add_score(5)
    persistence.add_score(20)
    engine.request_scoreboard()
    assert texts(observer) == ["No scores to load.\n", "Scoreboard\n\n\t1. 20\n\t2. 5\n"]


def test_unreadable_scoreboard(paths):
    paths[1].write_text("{broken", encoding="utf-8")
    engine = make_engine([[0, 0]], start=False)
    persistence, observer = attach(engine, paths)
    engine.request_scoreboard()
    assert texts(observer) == ["Error while loading scores.\n"]
    assert persistence.load_scores() == []


def test_clear_scoreboard(paths):
    engine = make_engine([[0, 0]], start=False)
    persistence, observer = attach(engine, paths)
    engine.request_scoreboard_clear()
    persistence.add_score(3)
    engine.request_scoreboard_clear()
    assert texts(observer) == ["No scoreboard to clear!\n", "Scoreboard cleared!\n"]
    assert not paths[1].exists()


def test_save_failure_is_reported(tmp_path):
    blocker = tmp_path / "blocker"
    blocker.write_text("", encoding="utf-8")
    engine = make_engine([[0, 0, 1]], start=False)
    attach(engine, (blocker / "save.json", tmp_path / "scores.json"))
    engine.new_game()
    assert engine.state == LifecycleState.ONGOING
    observer = engine.observers()[-1]
    assert texts(observer) == ["Failed to save the game.\n"]


def test_build_scoreboard_empty():
    assert build_scoreboard([]) == "Scoreboard\n\n"
