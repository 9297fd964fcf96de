"""Settings from ``.depgraph.toml`` or ``[tool.depgraph]`` in pyproject.toml."""

from __future__ import annotations

import logging
import tomllib
from dataclasses import dataclass, field, replace
from pathlib import Path
from typing import Any

from depgraph.errors import ConfigError
from depgraph.model import SourceKind, Variant

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class Settings:
    """Options of the project-graph pipeline."""

    build_path: str | None = None
    local_only: bool = True
    output: Path = Path("build") / "depgraph"
    configurations: tuple[str, ...] = ()
    variant: Variant = field(default_factory=Variant.main)

    def with_overrides(self, **overrides: Any) -> Settings:
        """Return a copy with every non-None override applied."""
        return replace(self, **{k: v for k, v in overrides.items() if v is not None})


def _read_table(project_dir: Path) -> dict[str, Any] | None:
    # Try .depgraph.toml first
    depgraph_toml = project_dir / ".depgraph.toml"
    if depgraph_toml.exists():
        try:
            with open(depgraph_toml, "rb") as f:
                data = tomllib.load(f)
        except (OSError, tomllib.TOMLDecodeError) as e:
            raise ConfigError(f"Could not read {depgraph_toml}: {e}") from e
        return data.get("depgraph", {})

    # Fall back to [tool.depgraph] in pyproject.toml
    pyproject = project_dir / "pyproject.toml"
    if pyproject.exists():
        try:
            with open(pyproject, "rb") as f:
                data = tomllib.load(f)
        except (OSError, tomllib.TOMLDecodeError) as e:
            logger.warning("Could not parse %s: %s", pyproject, e)
            return None
        return data.get("tool", {}).get("depgraph")

    return None


def settings_from_mapping(table: dict[str, Any]) -> Settings:
    settings = Settings()
    unknown = set(table) - {"build-path", "local-only", "output", "configurations", "variant"}
    if unknown:
        raise ConfigError(f"Unknown depgraph settings: {', '.join(sorted(unknown))}")

    build_path = table.get("build-path", settings.build_path)
    if build_path is not None and (
        not isinstance(build_path, str) or not build_path.startswith(":")
    ):
        raise ConfigError(f"'build-path' must be a path like ':', got {build_path!r}")

    local_only = table.get("local-only", settings.local_only)
    if not isinstance(local_only, bool):
        raise ConfigError(f"'local-only' must be a boolean, got {local_only!r}")

    configurations = table.get("configurations", [])
    if not isinstance(configurations, list) or not all(
        isinstance(c, str) for c in configurations
    ):
        raise ConfigError("'configurations' must be a list of names")

    variant_name = table.get("variant", settings.variant.name)
    try:
        kind = SourceKind(variant_name)
    except ValueError:
        kind = SourceKind.CUSTOM_JVM

    return Settings(
        build_path=build_path,
        local_only=local_only,
        output=Path(table.get("output", settings.output)),
        configurations=tuple(configurations),
        variant=Variant(name=variant_name, kind=kind),
    )


def load_settings(project_dir: Path) -> Settings:
    """Read depgraph settings for *project_dir*, falling back to defaults."""
    table = _read_table(project_dir)
    if table is None:
        return Settings()
    settings = settings_from_mapping(table)
    logger.debug("Settings for %s: %s", project_dir, settings)
    return settings
