"""Fill ``{{package:action}}`` tokens with supported-version text.

One rendered file is produced per major runtime version. The only action is
``versions``. A token that cannot be filled becomes ``N/A`` and adds an error;
a file with errors gets the ``.err`` extension instead of ``.txt`` so that a
clean earlier rendering is never overwritten by a broken one.
"""

import re
from collections.abc import Callable, Mapping
from dataclasses import dataclass
from pathlib import Path

TEMPLATE_TOKEN = re.compile(r"\{\{([-a-zA-Z0-9_]+:[-a-zA-Z0-9_]+)\}\}")
NOT_AVAILABLE = "N/A"

Action = Callable[[str, Mapping[str, str]], str | None]

ACTIONS: dict[str, Action] = {
    "versions": lambda package, supported: supported.get(package) or None,
}


@dataclass(frozen=True)
class RenderedTemplate:
    key: str
    parts: tuple[str, ...]
    errors: tuple[str, ...]

    @property
    def filename(self) -> str:
        return f"python{self.key}{'.err' if self.errors else '.txt'}"

    @property
    def trailer(self) -> str:
        if not self.errors:
            return ""
        return "\nErrors:\n" + "\n".join(self.errors) + "\n"

    @property
    def text(self) -> str:
        return "".join(self.parts) + self.trailer


def render_template(template: str, key: str, supported: Mapping[str, str]) -> RenderedTemplate:
    """Substitute every token of ``template`` for one major runtime version."""
    parts = TEMPLATE_TOKEN.split(template)
    errors: list[str] = []

    # split() with one capture group alternates text and token bodies
    for i in range(1, len(parts), 2):
        package, action_name = parts[i].split(":")
        action = ACTIONS.get(action_name)
        if action is None:
            parts[i] = NOT_AVAILABLE
            errors.append(f"Unknown action: {action_name} for package: {package}")
            continue
        value = action(package, supported)
        if value is None:
            parts[i] = NOT_AVAILABLE
            errors.append(f"No supported versions for {package}")
            continue
        parts[i] = value

    return RenderedTemplate(key=key, parts=tuple(parts), errors=tuple(errors))


def write_rendered(directory: Path, rendered: RenderedTemplate) -> Path:
    """Write one rendered template; the file is closed on every exit path."""
    directory.mkdir(parents=True, exist_ok=True)
    path = directory / rendered.filename
    with path.open("w", encoding="utf-8") as f:
        for part in rendered.parts:
            f.write(part)
        f.write(rendered.trailer)
    return path
