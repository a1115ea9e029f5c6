from pathlib import Path

import pytest

from branch_diff.state import load_default_branch, save_default_branch


def test_missing_state_file_has_no_default(tmp_path: Path):
    assert load_default_branch(tmp_path / "state.yml", "/repo") is None


def test_save_and_load_per_repository(tmp_path: Path):
    state = tmp_path / "nested" / "state.yml"
    save_default_branch(state, Path("/repo-a"), "develop")
    save_default_branch(state, Path("/repo-b"), "main")

    assert load_default_branch(state, Path("/repo-a")) == "develop"
    assert load_default_branch(state, "/repo-b") == "main"
    assert load_default_branch(state, "/repo-c") is None


def test_save_overwrites_previous_value(tmp_path: Path):
    state = tmp_path / "state.yml"
    save_default_branch(state, "/repo", "main")
    save_default_branch(state, "/repo", "release/2.x")
    assert load_default_branch(state, "/repo") == "release/2.x"


def test_malformed_state_file(tmp_path: Path):
    state = tmp_path / "state.yml"
    state.write_text("default_branches:\n  - main\n")
    with pytest.raises(ValueError):
        load_default_branch(state, "/repo")


def test_invalid_yaml_state_file(tmp_path: Path):
    state = tmp_path / "state.yml"
    state.write_text("default_branches: {a: [\n")
    with pytest.raises(ValueError, match="not valid YAML"):
        load_default_branch(state, "/repo")
