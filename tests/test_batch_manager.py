from datetime import date

import pytest

from chronohatch.batches import BatchFields
from chronohatch.batches.manager import BatchManager
from chronohatch.core import FixedClock
from chronohatch.core.errors import BatchNotFoundError, ChronoHatchValueError
from chronohatch.status import IncubationPhase


def _fields(pekin_fields: BatchFields, **update) -> BatchFields:
    return BatchFields.model_validate({**pekin_fields.model_dump(), **update})


def test_add_batch_persists_schedule(manager, store, pekin_fields) -> None:
    batch = manager.add_batch(pekin_fields)
    assert batch.id == "batch1"
    document = store.get("batch1")
    assert len(document["tasks"]) == 47
    assert document["start_date"] == "2024-01-01"
    assert document["tasks"][0]["date"] == "2024-01-02"
    assert document["hatched_eggs"] is None
    assert manager.get_batch("batch1").tasks == batch.tasks


def test_add_batch_rejects_unknown_species(manager, pekin_fields) -> None:
    with pytest.raises(ChronoHatchValueError, match="Unknown species"):
        manager.add_batch(_fields(pekin_fields, species_id="dodo"))
    assert manager.list_batches() == []


def test_add_batch_rejects_custom_days_past_incubation(manager, pekin_fields) -> None:
    with pytest.raises(ChronoHatchValueError):
        manager.add_batch(_fields(pekin_fields, custom_candling_days=[5, 29]))


def test_list_batches_ordered_by_set_date(manager, pekin_fields) -> None:
    manager.add_batch(_fields(pekin_fields, name="Later", start_date=date(2024, 2, 1)))
    manager.add_batch(_fields(pekin_fields, name="Earlier", start_date=date(2023, 12, 1)))
    assert [batch.name for batch in manager.list_batches()] == ["Earlier", "Later"]


def test_require_batch_missing(manager) -> None:
    assert manager.get_batch("nope") is None
    with pytest.raises(BatchNotFoundError):
        manager.require_batch("nope")
    with pytest.raises(BatchNotFoundError):
        manager.delete_batch("nope")


def test_update_preserves_or_regenerates(manager, pekin_fields) -> None:
    batch = manager.add_batch(pekin_fields)
    manager.set_task_completed(batch.id, "batch1-turn-1")

    renamed = manager.update_batch(batch.id, _fields(pekin_fields, name="Renamed"))
    assert renamed.task("batch1-turn-1").completed
    assert manager.require_batch(batch.id).task("batch1-turn-1").batch_name == "Renamed"

    moved = manager.update_batch(
        batch.id, _fields(pekin_fields, name="Renamed", start_date=date(2024, 1, 3))
    )
    assert not any(task.completed for task in moved.tasks)
    assert moved.task("batch1-turn-1").date == date(2024, 1, 4)


def test_update_rejects_egg_count_below_recorded(manager, pekin_fields) -> None:
    batch = manager.add_batch(pekin_fields)
    manager.add_candling_result(batch.id, day=7, fertile=10)
    with pytest.raises(ChronoHatchValueError):
        manager.update_batch(batch.id, _fields(pekin_fields, number_of_eggs=8))


def test_toggle_and_set_task(manager, pekin_fields) -> None:
    batch = manager.add_batch(pekin_fields)
    assert manager.set_task_completed(batch.id, "batch1-turn-3").completed
    assert not manager.set_task_completed(batch.id, "batch1-turn-3").completed
    task = manager.set_task_completed(batch.id, "batch1-turn-3", True, notes="done early")
    assert task.completed
    assert manager.require_batch(batch.id).task("batch1-turn-3").notes == "done early"
    with pytest.raises(ChronoHatchValueError):
        manager.set_task_completed(batch.id, "batch1-turn-99")


def test_tasks_for_date_sorted_by_batch_then_description(manager, pekin_fields) -> None:
    manager.add_batch(_fields(pekin_fields, name="zeta"))
    manager.add_batch(_fields(pekin_fields, name="Alpha"))
    agenda = manager.tasks_for_date("2024-01-11")
    assert [(task.batch_name, task.description) for task in agenda] == [
        ("Alpha", "Default candling (Day 10)"),
        ("Alpha", "Mist eggs"),
        ("Alpha", "Turn eggs"),
        ("zeta", "Default candling (Day 10)"),
        ("zeta", "Mist eggs"),
        ("zeta", "Turn eggs"),
    ]


def test_pending_tasks_default_to_today(manager, pekin_fields) -> None:
    batch = manager.add_batch(pekin_fields)
    pending = manager.pending_tasks(batch.id)
    assert [task.id for task in pending] == ["batch1-turn-9"]
    manager.set_task_completed(batch.id, "batch1-turn-9")
    assert manager.pending_tasks(batch.id) == []


def test_candling_results_sorted_and_validated(manager, pekin_fields) -> None:
    batch = manager.add_batch(pekin_fields)
    manager.add_candling_result(batch.id, day=25, fertile=9)
    first = manager.add_candling_result(batch.id, day=7, fertile=11, notes="two clears")
    stored = manager.require_batch(batch.id).candling_results
    assert [result.day for result in stored] == [7, 25]
    assert stored[0].id == first.id

    with pytest.raises(ChronoHatchValueError):
        manager.add_candling_result(batch.id, day=7, fertile=13)
    with pytest.raises(ChronoHatchValueError):
        manager.add_candling_result(batch.id, day=0, fertile=1)
    with pytest.raises(ChronoHatchValueError):
        manager.add_candling_result(batch.id, day=29, fertile=1)

    manager.delete_candling_result(batch.id, first.id)
    assert [r.day for r in manager.require_batch(batch.id).candling_results] == [25]
    with pytest.raises(ChronoHatchValueError):
        manager.delete_candling_result(batch.id, first.id)


def test_hatched_eggs_bounds(manager, pekin_fields) -> None:
    batch = manager.add_batch(pekin_fields)
    manager.set_hatched_eggs(batch.id, 10)
    assert manager.require_batch(batch.id).hatched_eggs == 10
    with pytest.raises(ChronoHatchValueError):
        manager.set_hatched_eggs(batch.id, 13)


def test_status_and_history_use_clock(store, species_table, pekin_fields) -> None:
    manager = BatchManager(store, species_table=species_table, clock=FixedClock(date(2024, 2, 10)))
    batch = manager.add_batch(pekin_fields)
    manager.add_batch(_fields(pekin_fields, name="Recent", start_date=date(2024, 2, 1)))
    assert manager.status(batch.id).phase is IncubationPhase.COMPLETED
    assert manager.status(batch.id, today=date(2024, 1, 27)).phase is IncubationPhase.HATCHING_WINDOW
    history = manager.history()
    assert [summary.batch_name for summary in history] == ["Pekin spring"]


def test_subscribe_wraps_documents(manager, pekin_fields) -> None:
    seen = []
    unsubscribe = manager.subscribe(seen.append)
    manager.add_batch(pekin_fields)
    unsubscribe()
    assert seen[0] == []
    assert seen[-1][0].name == "Pekin spring"
    assert len(seen[-1][0].tasks) == 47


def test_delete_batch(manager, pekin_fields) -> None:
    batch = manager.add_batch(pekin_fields)
    manager.delete_batch(batch.id)
    assert manager.list_batches() == []


def test_add_batch_is_a_single_complete_write(manager, pekin_fields) -> None:
    snapshots = []
    manager.subscribe(lambda batches: snapshots.append([len(b.tasks) for b in batches]))
    manager.add_batch(pekin_fields)
    assert snapshots == [[], [47]]


def test_legacy_species_batch_can_still_be_renamed(store, manager, pekin_fields) -> None:
    legacy = _fields(pekin_fields, species_id="dodo").model_dump(mode="json")
    store.create({**legacy, "id": "old", "tasks": []})

    renamed = manager.update_batch("old", _fields(pekin_fields, species_id="dodo", name="Kept"))
    assert renamed.name == "Kept"
    assert manager.status("old").phase is IncubationPhase.UNKNOWN

    with pytest.raises(ChronoHatchValueError, match="Unknown species"):
        manager.update_batch("old", _fields(pekin_fields, species_id="emu"))
