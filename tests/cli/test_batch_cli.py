import json
from pathlib import Path

import pandas as pd
from typer.testing import CliRunner

from chronohatch.cli.main import app
from tests.cli import cli_text

runner = CliRunner()


def _invoke(store: Path, *args: str, today: str = "2024-01-10"):
    return runner.invoke(app, ["--store", str(store), "--today", today, *args], prog_name="chronohatch")


def _batches(store: Path) -> list[dict]:
    return json.loads(store.read_text(encoding="utf-8"))["batches"]


def _create(store: Path, name: str = "Spring", species: str = "pekin_duck") -> str:
    result = _invoke(
        store,
        "batch",
        "create",
        "--name",
        name,
        "--species",
        species,
        "--eggs",
        "12",
        "--start",
        "2024-01-01",
    )
    assert result.exit_code == 0, cli_text(result)
    return next(batch["id"] for batch in _batches(store) if batch["name"] == name)


def test_create_and_show(tmp_path: Path) -> None:
    store = tmp_path / "batches.json"
    batch_id = _create(store)
    assert len(_batches(store)[0]["tasks"]) == 47

    shown = _invoke(store, "batch", "show", batch_id)
    assert shown.exit_code == 0, cli_text(shown)
    output = cli_text(shown)
    assert "Status: Inc. Day: 9" in output
    assert "Tasks: 0/47 completed" in output

    listed = _invoke(store, "batch", "list")
    assert listed.exit_code == 0
    assert "Batches (2024-01-10)" in cli_text(listed)


def test_create_with_custom_candling_days(tmp_path: Path) -> None:
    store = tmp_path / "batches.json"
    result = _invoke(
        store,
        "batch",
        "create",
        "--name",
        "Custom days",
        "--species",
        "chicken",
        "--eggs",
        "6",
        "--start",
        "2024-01-01",
        "--incubator",
        "auto",
        "--candling-days",
        "7, 12, 40, x",
    )
    assert result.exit_code == 0, cli_text(result)
    batch = _batches(store)[0]
    assert batch["custom_candling_days"] == [7, 12]
    assert batch["incubator_type"] == "auto"
    assert not any(task["type"] == "turn" for task in batch["tasks"])


def test_create_rejects_unknown_species(tmp_path: Path) -> None:
    store = tmp_path / "batches.json"
    result = _invoke(
        store, "batch", "create", "--name", "Dodo", "--species", "dodo", "--eggs", "3"
    )
    assert result.exit_code != 0
    assert "Unknown species" in cli_text(result)
    assert not store.exists()


def test_edit_preserves_then_regenerates(tmp_path: Path) -> None:
    store = tmp_path / "batches.json"
    batch_id = _create(store)
    toggled = _invoke(store, "task", "toggle", batch_id, f"{batch_id}-turn-1")
    assert toggled.exit_code == 0
    assert "marked completed" in cli_text(toggled)

    renamed = _invoke(store, "batch", "edit", batch_id, "--name", "Renamed")
    assert renamed.exit_code == 0, cli_text(renamed)
    assert "Schedule preserved" in cli_text(renamed)
    tasks = _batches(store)[0]["tasks"]
    assert [task["id"] for task in tasks if task["completed"]] == [f"{batch_id}-turn-1"]

    moved = _invoke(store, "batch", "edit", batch_id, "--start", "2024-01-05")
    assert moved.exit_code == 0, cli_text(moved)
    assert "Schedule regenerated" in cli_text(moved)
    batch = _batches(store)[0]
    assert batch["name"] == "Renamed"
    assert not any(task["completed"] for task in batch["tasks"])


def test_task_list_for_date(tmp_path: Path) -> None:
    store = tmp_path / "batches.json"
    _create(store)
    result = _invoke(store, "task", "list", "--date", "2024-01-11")
    assert result.exit_code == 0, cli_text(result)
    assert "Tasks for 2024-01-11" in cli_text(result)

    empty = _invoke(store, "task", "list", "--date", "2023-06-01")
    assert "No tasks for 2023-06-01." in cli_text(empty)


def test_candling_and_hatch_flow(tmp_path: Path) -> None:
    store = tmp_path / "batches.json"
    batch_id = _create(store)

    added = _invoke(store, "candle", "add", batch_id, "--day", "7", "--fertile", "10")
    assert added.exit_code == 0, cli_text(added)
    result_id = _batches(store)[0]["candling_results"][0]["id"]

    too_many = _invoke(store, "candle", "add", batch_id, "--day", "10", "--fertile", "20")
    assert too_many.exit_code != 0
    assert len(_batches(store)[0]["candling_results"]) == 1

    hatched = _invoke(store, "batch", "hatched", batch_id, "9")
    assert hatched.exit_code == 0
    assert _batches(store)[0]["hatched_eggs"] == 9

    out_csv = tmp_path / "history.csv"
    history = _invoke(store, "history", "--out-csv", str(out_csv), today="2024-03-01")
    assert history.exit_code == 0, cli_text(history)
    frame = pd.read_csv(out_csv)
    assert frame.loc[0, "batch_name"] == "Spring"
    assert frame.loc[0, "hatched_eggs"] == 9
    assert frame.loc[0, "fertile_eggs"] == 10

    removed = _invoke(store, "candle", "remove", batch_id, result_id)
    assert removed.exit_code == 0
    assert _batches(store)[0]["candling_results"] == []


def test_delete_batch(tmp_path: Path) -> None:
    store = tmp_path / "batches.json"
    batch_id = _create(store)
    result = _invoke(store, "batch", "delete", batch_id, "--yes")
    assert result.exit_code == 0
    assert _batches(store) == []

    missing = _invoke(store, "batch", "delete", batch_id, "--yes")
    assert missing.exit_code != 0
    assert "not found" in cli_text(missing)


def test_schedule_preview_does_not_persist(tmp_path: Path) -> None:
    store = tmp_path / "batches.json"
    out_csv = tmp_path / "schedule.csv"
    result = _invoke(
        store,
        "schedule",
        "--species",
        "pekin_duck",
        "--start",
        "2024-01-01",
        "--out-csv",
        str(out_csv),
    )
    assert result.exit_code == 0, cli_text(result)
    assert "47 task(s)" in cli_text(result)
    frame = pd.read_csv(out_csv)
    assert len(frame) == 47
    assert frame.loc[0, "date"] == "2024-01-02"
    assert not store.exists()


def test_species_commands(tmp_path: Path) -> None:
    store = tmp_path / "batches.json"
    listed = _invoke(store, "species", "list")
    assert listed.exit_code == 0
    assert "chicken" in cli_text(listed)

    shown = _invoke(store, "species", "show", "pekin_duck")
    assert shown.exit_code == 0
    output = cli_text(shown)
    assert "Lockdown day: 25" in output
    assert "Misting days: 10-24" in output

    unknown = _invoke(store, "species", "show", "dodo")
    assert unknown.exit_code != 0


def test_store_from_environment_and_config(tmp_path: Path) -> None:
    env_store = tmp_path / "env.json"
    result = runner.invoke(
        app,
        ["--today", "2024-01-10", "batch", "create", "--name", "Env", "--species", "chicken", "--eggs", "4"],
        env={"CHRONOHATCH_STORE": str(env_store)},
    )
    assert result.exit_code == 0, cli_text(result)
    assert _batches(env_store)[0]["start_date"] == "2024-01-10"

    config = tmp_path / "chronohatch.yaml"
    config.write_text("store_path: configured.json\nevent_log: events.jsonl\n", encoding="utf-8")
    result = runner.invoke(
        app,
        ["--config", str(config), "batch", "create", "--name", "Conf", "--species", "turkey", "--eggs", "4"],
    )
    assert result.exit_code == 0, cli_text(result)
    assert _batches(tmp_path / "configured.json")[0]["name"] == "Conf"
    events = (tmp_path / "events.jsonl").read_text(encoding="utf-8").splitlines()
    assert json.loads(events[0])["event"] == "batch_created"
    assert json.loads(events[0])["source"] == "cli"
