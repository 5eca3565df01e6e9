"""End-to-end tests for the context-hopper CLI using click's CliRunner."""

import json
from pathlib import Path

import pytest
import tiktoken
import yaml
from click.testing import CliRunner

from context_hopper.context_store import ITEMS_KEY
from context_hopper.groups import GROUPS_KEY
from context_hopper.main import cli


@pytest.fixture
def workspace(tmp_path, monkeypatch):
    """Run commands in a temp project with a private state file and no tokenizer download."""

    def no_tokenizer(model):
        raise KeyError(model)

    monkeypatch.setattr(tiktoken, "encoding_for_model", no_tokenizer)
    project = tmp_path / "project"
    (project / "src").mkdir(parents=True)
    (project / "src" / "app.ts").write_text("// entry\nconst app = 1;\n\n\nexport default app;\n")
    (project / "src" / "util.ts").write_text('const apiKey = "abc123";\n')
    monkeypatch.chdir(project)
    state_path = tmp_path / "state.json"
    monkeypatch.setenv("CONTEXT_HOPPER_STATE", str(state_path))
    return project, state_path


def invoke(*args):
    return CliRunner().invoke(cli, list(args), catch_exceptions=False)


def stored(state_path: Path, key: str) -> list[dict]:
    return json.loads(state_path.read_text()).get(key, [])


def test_no_subcommand_shows_help(workspace):
    result = invoke()
    assert result.exit_code == 0
    assert "Usage" in result.output


def test_add_and_list(workspace):
    project, state_path = workspace
    result = invoke("add", "src/app.ts", "src/util.ts")
    assert result.exit_code == 0
    assert "Added app.ts" in result.output

    items = stored(state_path, ITEMS_KEY)
    assert [item["content"] for item in items] == [
        str((project / "src" / "app.ts").resolve()),
        str((project / "src" / "util.ts").resolve()),
    ]
    assert items[0]["language_id"] == "typescript"

    result = invoke("list")
    assert result.exit_code == 0
    assert "Total Tokens" in result.output


def test_add_duplicate_reports_existing(workspace):
    _, state_path = workspace
    invoke("add", "src/app.ts")
    result = invoke("add", "src/app.ts")
    assert "Already in context" in result.output
    assert len(stored(state_path, ITEMS_KEY)) == 1


def test_add_with_lines(workspace):
    _, state_path = workspace
    result = invoke("add", "src/app.ts", "--lines", "2-3")
    assert result.exit_code == 0
    assert stored(state_path, ITEMS_KEY)[0]["range"] == {"start": 1, "end": 2}


def test_add_with_invalid_lines(workspace):
    result = invoke("add", "src/app.ts", "--lines", "5-2")
    assert result.exit_code == 2
    assert "is after end" in result.output


def test_note_and_remove(workspace):
    _, state_path = workspace
    invoke("note", "Refactor the entry point")
    note_id = stored(state_path, ITEMS_KEY)[0]["id"]

    result = invoke("remove", note_id)
    assert "Removed 1 item(s)" in result.output
    assert stored(state_path, ITEMS_KEY) == []


def test_reorder(workspace):
    _, state_path = workspace
    invoke("add", "src/app.ts", "src/util.ts")
    invoke("note", "last")
    first, second, third = (item["id"] for item in stored(state_path, ITEMS_KEY))

    invoke("reorder", third, first)
    assert [item["id"] for item in stored(state_path, ITEMS_KEY)] == [third, first, second]


def test_export_stdout_optimizes_and_scrubs(workspace):
    invoke("add", "src/app.ts", "src/util.ts")
    invoke("note", "Keep the API stable")
    invoke("config", "set", "optimization.remove_comments", "true")
    invoke("config", "set", "optimization.remove_empty_lines", "on")

    result = invoke("export", "--stdout")
    assert result.exit_code == 0
    output = result.stdout
    assert "// File: app.ts" in output
    assert "// entry" not in output
    assert "const app = 1;\nexport default app;\n" in output
    assert 'const apiKey = "<REDACTED_SECRET>";' in output
    assert "abc123" not in output
    assert output.index("// File: app.ts") < output.index("// File: util.ts") < output.index("// Note:")


def test_export_to_file_reports_missing_file(workspace):
    project, _ = workspace
    invoke("add", "src/app.ts")
    (project / "src" / "app.ts").unlink()

    result = invoke("export", "--output", "out.txt")
    assert result.exit_code == 0
    assert "// Error reading file:" in (project / "out.txt").read_text()


def test_export_empty_context(workspace):
    result = invoke("export", "--stdout")
    assert result.exit_code == 0
    assert "Nothing to export" in result.output


def test_tree_and_save(workspace):
    _, state_path = workspace
    invoke("add", "src/app.ts", "src/util.ts")

    result = invoke("tree", "--save")
    assert result.exit_code == 0
    assert "├── app.ts" in result.output
    assert "└── util.ts" in result.output

    items = stored(state_path, ITEMS_KEY)
    assert items[-1]["type"] == "text"
    assert items[-1]["label"] == "Project structure (src)"


def test_tree_without_files(workspace):
    invoke("note", "just a note")
    result = invoke("tree")
    assert result.exit_code == 1
    assert "No files in context" in result.output


def test_group_save_load_delete(workspace):
    _, state_path = workspace
    invoke("add", "src/app.ts")
    result = invoke("group", "save", "feature")
    assert result.exit_code == 0
    group_id = stored(state_path, GROUPS_KEY)[0]["id"]

    invoke("clear", "--force")
    assert stored(state_path, ITEMS_KEY) == []

    result = invoke("group", "load", "feature")
    assert "Loaded 1 items" in result.output
    assert len(stored(state_path, ITEMS_KEY)) == 1

    result = invoke("group", "pin", group_id)
    assert "Pinned" in result.output
    assert stored(state_path, GROUPS_KEY)[0]["pinned"] is True

    result = invoke("group", "delete", group_id, "--force")
    assert result.exit_code == 0
    assert stored(state_path, GROUPS_KEY) == []


def test_group_load_unknown(workspace):
    result = invoke("group", "load", "missing")
    assert result.exit_code == 1
    assert "not found" in result.output


def test_config_set_and_show(workspace):
    project, _ = workspace
    result = invoke("config", "set", "tokens.model", "gpt-4o")
    assert result.exit_code == 0

    settings = yaml.safe_load((project / ".context-hopper" / "settings.yaml").read_text())
    assert settings == {"tokens": {"model": "gpt-4o"}}

    result = invoke("config", "show")
    assert "model: gpt-4o" in result.output


def test_config_set_rejects_non_boolean(workspace):
    result = invoke("config", "set", "optimization.remove_comments", "maybe")
    assert result.exit_code == 2
