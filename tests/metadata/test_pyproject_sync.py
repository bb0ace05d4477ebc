from __future__ import annotations

from pathlib import Path
import tomllib

import turnstream


REPO_ROOT = Path(__file__).resolve().parents[2]
README_PATH = REPO_ROOT / "README.md"
PYPROJECT_PATH = REPO_ROOT / "pyproject.toml"

SHORT_DESCRIPTION = (
    "Normalize provider-neutral LLM output into canonical model-turn responses."
)


def load_pyproject() -> dict:
    with PYPROJECT_PATH.open("rb") as handle:
        return tomllib.load(handle)


def test_readme_and_pyproject_descriptions_are_in_sync() -> None:
    pyproject = load_pyproject()
    description = pyproject["project"]["description"]
    readme_text = README_PATH.read_text(encoding="utf-8")

    assert description == SHORT_DESCRIPTION
    assert description in readme_text, "README must include the project description from pyproject.toml"


def test_package_version_matches_pyproject() -> None:
    pyproject = load_pyproject()

    assert pyproject["project"]["version"] == turnstream.__version__


def test_runtime_dependencies_cover_imported_stack() -> None:
    dependencies = load_pyproject()["project"]["dependencies"]

    assert any(requirement.startswith("pydantic") for requirement in dependencies)
