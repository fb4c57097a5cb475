import sys
import tomllib
from dataclasses import dataclass
from pathlib import Path

import tomlkit

from versweep.core.differencing import DEFAULT_BASELINE_OS

DEFAULT_VERSIONS_FILE = "versweep-versions.toml"


@dataclass(frozen=True)
class LoadedConfig:
    """In-memory representation of ``[tool.versweep]`` in pyproject.toml."""

    versions_file: Path
    summary_dir: Path
    baseline_os: str
    python: str
    package: str
    version: str


def _read_pyproject(project_dir: Path) -> dict:
    pyproject_path = project_dir / "pyproject.toml"
    if not pyproject_path.exists():
        return {}
    with pyproject_path.open("rb") as f:
        return tomllib.load(f)


def load_config(project_dir: Path) -> LoadedConfig:
    """Load ``[tool.versweep]`` from project_dir/pyproject.toml, filling defaults.

    Example config:
      [tool.versweep]
      versions_file = "versweep-versions.toml"
      summary_dir = "compat-results"
      baseline_os = "ubuntu"
      python = ".venv/bin/python"

    ``package`` and ``version`` default to the ``[project]`` table, then to
    the directory name and ``0.0.0``.
    """
    data = _read_pyproject(project_dir)
    section = data.get("tool", {}).get("versweep", {})
    project = data.get("project", {})

    return LoadedConfig(
        versions_file=project_dir / str(section.get("versions_file", DEFAULT_VERSIONS_FILE)),
        summary_dir=project_dir / str(section.get("summary_dir", ".")),
        baseline_os=str(section.get("baseline_os", DEFAULT_BASELINE_OS)),
        python=str(section.get("python", sys.executable)),
        package=str(section.get("package", project.get("name", project_dir.name))),
        version=str(section.get("version", project.get("version", "0.0.0"))),
    )


def write_default_config(project_dir: Path) -> bool:
    """Add a ``[tool.versweep]`` table with defaults to pyproject.toml.

    Existing content and formatting are preserved. Keys already present in
    the table are left alone.

    Returns:
        True if the file changed
    """
    pyproject_path = project_dir / "pyproject.toml"
    if pyproject_path.exists():
        with pyproject_path.open("r", encoding="utf-8") as f:
            doc = tomlkit.load(f)
    else:
        doc = tomlkit.document()

    if "tool" not in doc:
        doc["tool"] = tomlkit.table()  # type: ignore[index]
    if "versweep" not in doc["tool"]:  # type: ignore[operator]
        doc["tool"]["versweep"] = tomlkit.table()  # type: ignore[index]
    section = doc["tool"]["versweep"]  # type: ignore[index]

    defaults = {
        "versions_file": DEFAULT_VERSIONS_FILE,
        "summary_dir": ".",
        "baseline_os": DEFAULT_BASELINE_OS,
    }
    changed = False
    for key, value in defaults.items():
        if key not in section:
            section[key] = value  # type: ignore[index]
            changed = True

    if changed:
        with pyproject_path.open("w", encoding="utf-8") as f:
            tomlkit.dump(doc, f)
    return changed
