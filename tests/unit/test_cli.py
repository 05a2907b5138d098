import asyncio
import json

from typer.testing import CliRunner

import freightflow.persistence as persistence
from freightflow.cli import app
from freightflow.persistence import DraftStore, InMemoryBackend
from freightflow.steps import StepGraph, new_workflow_state


def _setup_store() -> DraftStore:
    store = DraftStore(InMemoryBackend())
    persistence._draft_store_instance = store
    return store


def test_draft_show_and_clear():
    store = _setup_store()
    state = new_workflow_state()
    graph = StepGraph(state)
    graph.advance()
    graph.advance()
    asyncio.run(store.save(state))

    runner = CliRunner()
    result = runner.invoke(app, ["draft", "show"])
    assert (
        result.exit_code == 0
    ), f"Command failed with exit code {result.exit_code}. Output: {result.output}"
    assert "fresh" in result.output
    assert "Current step: 3 (Pickup Request)" in result.output
    assert "Completed steps: 1, 2" in result.output

    result = runner.invoke(app, ["draft", "clear"])
    assert result.exit_code == 0
    assert "Draft cleared" in result.output

    result = runner.invoke(app, ["draft", "show"])
    assert (
        result.exit_code == 1
    ), f"Expected exit code 1 for missing draft, got {result.exit_code}. Output: {result.output}"
    assert "No draft found" in result.output


def test_autofill_prints_patch(tmp_path):
    order_path = tmp_path / "order.json"
    order_path.write_text(json.dumps({"Shipping City": "Reno", "Customer State": "NV"}))

    runner = CliRunner()
    result = runner.invoke(app, ["autofill", str(order_path), "--step", "2"])
    assert result.exit_code == 0, result.output
    patch = json.loads(result.output)
    assert patch == {
        "consignee.address.cityName": "Reno",
        "consignee.address.stateCd": "NV",
    }


def test_autofill_rejects_bad_input(tmp_path):
    runner = CliRunner()
    bad = tmp_path / "bad.json"
    bad.write_text("[1, 2]")

    assert runner.invoke(app, ["autofill", str(bad)]).exit_code == 1
    assert runner.invoke(app, ["autofill", str(tmp_path / "none.json")]).exit_code == 1
    assert runner.invoke(app, ["autofill", str(bad), "--step", "7"]).exit_code == 1

    empty = tmp_path / "empty.json"
    empty.write_text("{}")
    result = runner.invoke(app, ["autofill", str(empty), "--step", "4"])
    assert result.exit_code == 0
    assert "No fields would be filled." in result.output
