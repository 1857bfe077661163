"""The ``[tool.memocalc]`` table of pyproject.toml.

Example:
    [tool.memocalc]
    expression = "examples.scenarios:complex_tree"
    output = "build/report.toml"

``expression`` may also be a table ``{ script = "trees.py", name = "tree" }``.
Relative paths are taken from the directory holding pyproject.toml.

"""

from __future__ import annotations

import tomllib
from dataclasses import dataclass, replace
from pathlib import Path

_KEYS = frozenset({"expression", "output"})


class ConfigError(Exception):
    """The ``[tool.memocalc]`` table is malformed."""


@dataclass(slots=True, frozen=True)
class ExpressionRef:
    """Where an expression tree lives.

    Attributes:
        target: A script file (`Path`) or the dotted name of an importable
            module (`str`).
        name: Variable holding the tree. When None, the first public
            module-level Node is used.

    """

    target: Path | str
    name: str | None = None

    @classmethod
    def parse(cls, text: str, name: str | None = None) -> ExpressionRef:
        """Parse ``target`` or ``target:variable``; an explicit `name` wins.

        Targets ending in ``.py`` or containing a path separator are scripts.
        """
        target, sep, variable = text.rpartition(":")
        if not sep or not variable.isidentifier():
            target, variable = text, ""
        if target.endswith(".py") or "/" in target or "\\" in target:
            return cls(Path(target), name or variable or None)
        return cls(target, name or variable or None)

    def __str__(self) -> str:
        return f"{self.target}:{self.name}" if self.name else str(self.target)


@dataclass(slots=True, frozen=True)
class MemocalcConfig:
    expression: ExpressionRef | None = None
    output: Path | None = None
    root: Path | None = None


def find_pyproject_toml(start: Path | None = None) -> Path | None:
    """Return the nearest pyproject.toml in `start` (default: cwd) or its parents."""
    start = (start or Path.cwd()).resolve()
    for directory in (start, *start.parents):
        candidate = directory / "pyproject.toml"
        if candidate.is_file():
            return candidate
    return None


def _parse_expression(value: object, root: Path) -> ExpressionRef:
    match value:
        case str():
            ref = ExpressionRef.parse(value)
        case {"script": str(script), "name": str(name)} if len(value) == 2:  # noqa: PLR2004
            ref = ExpressionRef(Path(script), name)
        case {"script": str(script)} if len(value) == 1:
            ref = ExpressionRef(Path(script))
        case _:
            msg = (
                "[tool.memocalc].expression must be 'module:variable', a script path, "
                'or a table { script = "file.py", name = "variable" }'
            )
            raise ConfigError(msg)

    if isinstance(ref.target, Path):
        ref = replace(ref, target=root / ref.target)
    return ref


def load_config(pyproject_path: Path) -> MemocalcConfig:
    """Read `pyproject_path` and validate its ``[tool.memocalc]`` table.

    Raises:
        ConfigError: On invalid TOML, unknown keys or values of the wrong type.

    """
    root = pyproject_path.parent
    try:
        data = tomllib.loads(pyproject_path.read_text(encoding="utf-8"))
    except tomllib.TOMLDecodeError as e:
        msg = f"Invalid TOML in {pyproject_path}: {e}"
        raise ConfigError(msg) from e

    section = data.get("tool", {}).get("memocalc", {})
    if not isinstance(section, dict):
        msg = "[tool.memocalc] must be a table"
        raise ConfigError(msg)
    if unknown := sorted(set(section) - _KEYS):
        msg = f"Unknown [tool.memocalc] keys: {', '.join(unknown)}"
        raise ConfigError(msg)

    config = MemocalcConfig(root=root)
    if "expression" in section:
        config = replace(config, expression=_parse_expression(section["expression"], root))
    if "output" in section:
        output = section["output"]
        if not isinstance(output, str):
            msg = f"[tool.memocalc].output must be a path string, got {type(output).__name__}"
            raise ConfigError(msg)
        config = replace(config, output=root / output)
    return config


def get_config() -> MemocalcConfig:
    """Load the configuration governing the current directory, if any."""
    pyproject_path = find_pyproject_toml()
    if pyproject_path is None:
        return MemocalcConfig()
    return load_config(pyproject_path)
