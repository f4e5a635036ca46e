from datetime import date, timedelta

from chronohatch.batches import (
    BatchFields,
    apply_batch_edit,
    create_batch,
    should_regenerate,
)
from chronohatch.scheduling import IncubatorType


def _completed(batch, *task_ids):
    for task in batch.tasks:
        if task.id in task_ids:
            task.completed = True
    return batch


def _edit(fields: BatchFields, **update) -> BatchFields:
    return BatchFields.model_validate({**fields.model_dump(), **update})


def test_should_regenerate_only_for_timeline_fields(pekin_fields) -> None:
    assert not should_regenerate(pekin_fields, _edit(pekin_fields, name="Renamed"))
    assert not should_regenerate(pekin_fields, _edit(pekin_fields, notes="warm room"))
    assert not should_regenerate(pekin_fields, _edit(pekin_fields, number_of_eggs=20))
    assert should_regenerate(pekin_fields, _edit(pekin_fields, start_date=date(2024, 1, 2)))
    assert should_regenerate(pekin_fields, _edit(pekin_fields, species_id="chicken"))
    assert should_regenerate(
        pekin_fields, _edit(pekin_fields, incubator_type=IncubatorType.AUTO)
    )
    assert should_regenerate(pekin_fields, _edit(pekin_fields, custom_candling_days=[12]))


def test_custom_days_compared_normalised(pekin_fields) -> None:
    old = _edit(pekin_fields, custom_candling_days=[12, 5])
    new = _edit(pekin_fields, custom_candling_days=[5, 12, 12])
    assert not should_regenerate(old, new)


def test_create_generates_schedule(pekin_fields) -> None:
    batch = create_batch("b1", pekin_fields)
    assert len(batch.tasks) == 47
    assert batch.candling_results == []
    assert batch.hatched_eggs is None


def test_name_edit_preserves_completion(pekin_fields) -> None:
    batch = _completed(create_batch("b1", pekin_fields), "b1-turn-1", "b1-turn-2")
    edited, regenerated = apply_batch_edit(batch, _edit(pekin_fields, name="Renamed"))
    assert not regenerated
    assert edited.name == "Renamed"
    assert {t.id for t in edited.tasks if t.completed} == {"b1-turn-1", "b1-turn-2"}
    assert all(task.batch_name == "Renamed" for task in edited.tasks)
    # input batch untouched
    assert batch.name == "Pekin spring"


def test_notes_edit_preserves_completion(pekin_fields) -> None:
    batch = _completed(create_batch("b1", pekin_fields), "b1-mist-10")
    edited, regenerated = apply_batch_edit(batch, _edit(pekin_fields, notes="humidity 55%"))
    assert not regenerated
    assert edited.task("b1-mist-10").completed


def test_start_date_edit_resets_and_shifts_dates(pekin_fields) -> None:
    batch = _completed(create_batch("b1", pekin_fields), "b1-turn-1", "b1-lockdown-25")
    before = {task.id: task.date for task in batch.tasks}
    edited, regenerated = apply_batch_edit(
        batch, _edit(pekin_fields, start_date=date(2024, 1, 4))
    )
    assert regenerated
    assert not any(task.completed for task in edited.tasks)
    after = {task.id: task.date for task in edited.tasks}
    assert after.keys() == before.keys()
    assert all(after[task_id] - before[task_id] == timedelta(days=3) for task_id in before)


def test_several_timeline_changes_regenerate_once(pekin_fields) -> None:
    batch = create_batch("b1", pekin_fields)
    edited, regenerated = apply_batch_edit(
        batch,
        _edit(
            pekin_fields,
            species_id="chicken",
            incubator_type=IncubatorType.AUTO,
            start_date=date(2024, 2, 1),
        ),
    )
    assert regenerated
    assert len(edited.tasks) == 7
    assert len({task.id for task in edited.tasks}) == len(edited.tasks)


def test_edit_keeps_candling_and_hatch_data(pekin_fields) -> None:
    batch = create_batch("b1", pekin_fields)
    batch.hatched_eggs = 8
    edited, _ = apply_batch_edit(batch, _edit(pekin_fields, start_date=date(2024, 1, 5)))
    assert edited.hatched_eggs == 8
