"""Identity of dependency graph nodes.

A node is one of three coordinate kinds:

* :class:`ModuleCoordinates`: a published component (``group:artifact``).
* :class:`ProjectCoordinates`: a local project within a specific build.
* :class:`IncludedBuildCoordinates`: a project that lives in another build of
  a composite build, seen from the current build.

Python equality (``==`` / ``hash``) is plain structural value equality and is
what graph nodes are keyed by.  :meth:`Coordinates.matches` is the looser
identity-equivalence used when deciding whether two differently-labelled nodes
denote the same dependency.
"""

from __future__ import annotations

import re
from dataclasses import dataclass, field, replace
from enum import Enum
from typing import Annotated, Literal, Union

import xxhash
from pydantic import Field, PlainSerializer

from depgraph.errors import ConstructionError, IdentifierError, ParseError


class CoordinatesNotation(str, Enum):
    """Notation to prefer when presenting coordinates to the user."""

    GA = "ga"
    PROJECT = "project"


def _sorted_capabilities(capabilities: frozenset[str]) -> list[str]:
    return sorted(capabilities)


def _sorted_attributes(attributes: dict[str, str]) -> dict[str, str]:
    return dict(sorted(attributes.items()))


# Set-valued fields are always emitted in sorted order so encodings are stable.
Capabilities = Annotated[
    frozenset[str], PlainSerializer(_sorted_capabilities, return_type=list[str])
]
Attributes = Annotated[
    dict[str, str], PlainSerializer(_sorted_attributes, return_type=dict[str, str])
]


def fingerprint(capabilities: list[str]) -> str:
    """Return the 64-bit fingerprint of a capability list as 16 hex digits.

    The hash is xxHash64 with seed 0 over the UTF-8 bytes of the sorted,
    underscore-joined capabilities.  It ends up in file names, so it must never
    change between releases.
    """
    joined = "_".join(sorted(capabilities))
    return xxhash.xxh64_hexdigest(joined.encode("utf-8"), seed=0)


class Coordinates:
    """Behaviour shared by all coordinate kinds.

    Subclasses are frozen dataclasses providing ``group``, ``artifact``,
    ``project_path``, ``build_path``, ``version``, ``capabilities`` and
    ``attributes`` either as fields or as properties.
    """

    preferred_notation = CoordinatesNotation.GA

    def _validate(self) -> None:
        if not self.artifact:
            raise ConstructionError("'artifact' must not be empty")
        if self.group is None and self.project_path is None:
            raise ConstructionError("'group' and 'project_path' cannot both be None")
        if self.project_path is not None:
            if self.project_path != ":" and not self.project_path.endswith(
                f":{self.artifact}"
            ):
                raise ConstructionError(
                    f"last segment of project path {self.project_path!r} "
                    f"must equal artifact {self.artifact!r}"
                )
            if self.build_path is None:
                raise ConstructionError(
                    "If the 'project_path' is provided, the 'build_path' "
                    "also needs to be provided"
                )

    def _freeze_capabilities(self) -> None:
        if not isinstance(self.capabilities, frozenset):
            object.__setattr__(self, "capabilities", frozenset(self.capabilities))

    # -- identifiers -------------------------------------------------------

    def group_known(self) -> bool:
        return self.group is not None

    def is_local_project(self) -> bool:
        return self.project_path is not None

    def ga(self) -> str | None:
        """``group:artifact``, or None when the group is unknown."""
        if self.group_known():
            return f"{self.group}:{self.artifact}"
        return None

    @property
    def identifier(self) -> str:
        ga = self.ga()
        return ga if ga is not None else self.project_path

    def gav(self) -> str:
        """Human-readable label used in rendered graphs."""
        return self.identifier

    def preferred_identifier(self, from_: Coordinates) -> str:
        """Return the notation to show when *from_* refers to these coordinates.

        Project notation is only used between projects of the same build.
        Only use this for presentation, never for identity checks.
        """
        if (
            self.preferred_notation is CoordinatesNotation.PROJECT
            and from_.build_path == self.build_path
        ):
            if self.project_path is None:
                raise IdentifierError(f"{self!r} has no project path")
            return self.project_path
        ga = self.ga()
        if ga is None:
            raise IdentifierError(f"{self!r} has no known group")
        return ga

    # -- capabilities ------------------------------------------------------

    def is_default_capability(self, capability: str) -> bool:
        if self.group_known():
            return capability == self.ga()
        # group unknown: only match the name part and assume the group fits
        return capability.endswith(f":{self.artifact}")

    def capabilities_without_default(self) -> list[str]:
        return sorted(c for c in self.capabilities if not self.is_default_capability(c))

    def without_default_capability(self) -> Coordinates:
        """Return a copy whose capabilities omit the implicit default one."""
        remaining = frozenset(self.capabilities_without_default())
        if remaining == self.capabilities:
            return self
        return replace(self, capabilities=remaining)

    # -- identity ----------------------------------------------------------

    def matches(self, other: Coordinates | str | re.Pattern[str]) -> bool:
        """Do these coordinates denote *other*?

        *other* may be another Coordinates value, an exact identifier string
        (project path or GA) or a compiled pattern that must match either one
        in full.
        """
        if isinstance(other, str):
            return other == self.project_path or other == self.ga()
        if isinstance(other, re.Pattern):
            return any(
                candidate is not None and other.fullmatch(candidate) is not None
                for candidate in (self.project_path, self.ga())
            )
        return self._matches_coordinates(other)

    def _matches_coordinates(self, other: Coordinates) -> bool:
        same_ga = self.group_known() and other.group_known() and self.ga() == other.ga()
        same_project = (
            self.project_path is not None
            and self.project_path == other.project_path
            and self.build_path == other.build_path
        )
        if not (same_ga or same_project):
            return False
        return (
            self.without_default_capability().capabilities
            == other.without_default_capability().capabilities
        )

    def maybe_project_coordinates(self, reference_build_path: str) -> Coordinates:
        return self

    # -- file names --------------------------------------------------------

    def _serializable_id(self) -> str:
        return self.identifier.replace(":", "__")

    def to_file_name(self) -> str:
        """Return a stable name that never collides for non-matching nodes."""
        capabilities = self.capabilities_without_default()
        if not capabilities:
            return self._serializable_id()
        return f"{self._serializable_id()}__{fingerprint(capabilities)}"

    def sort_key(self) -> tuple[str, str, str]:
        return self.gav(), self.to_file_name(), self.kind


@dataclass(frozen=True)
class ModuleCoordinates(Coordinates):
    """A published component."""

    group: str
    artifact: str
    version: str | None = None
    capabilities: Capabilities = frozenset()
    attributes: Attributes = field(default_factory=dict, hash=False)
    kind: Literal["module"] = "module"

    def __post_init__(self) -> None:
        self._freeze_capabilities()
        self._validate()

    @property
    def project_path(self) -> None:
        return None

    @property
    def build_path(self) -> None:
        return None

    def gav(self) -> str:
        if self.version:
            return f"{self.group}:{self.artifact}:{self.version}"
        return f"{self.group}:{self.artifact}"


@dataclass(frozen=True)
class ProjectCoordinates(Coordinates):
    """A local project of a specific build.

    ``artifact`` defaults to the last segment of ``project_path``; it must be
    given explicitly for the root project ``":"``.
    """

    project_path: str
    build_path: str | None = ":"
    artifact: str | None = None
    group: str | None = None
    version: str | None = None
    capabilities: Capabilities = frozenset()
    attributes: Attributes = field(default_factory=dict, hash=False)
    kind: Literal["project"] = "project"

    preferred_notation = CoordinatesNotation.PROJECT

    def __post_init__(self) -> None:
        if self.artifact is None:
            if self.project_path == ":":
                raise ConstructionError("the root project needs an explicit artifact")
            object.__setattr__(self, "artifact", self.project_path.rsplit(":", 1)[-1])
        self._freeze_capabilities()
        self._validate()

    @property
    def identifier(self) -> str:
        return self.project_path

    def _serializable_id(self) -> str:
        ga = self.ga()
        return (ga if ga is not None else self.project_path).replace(":", "__")


@dataclass(frozen=True)
class IncludedBuildCoordinates(Coordinates):
    """A project of another build participating in a composite build."""

    target_build_path: str
    resolved_project: ProjectCoordinates
    version: str | None = None
    capabilities: Capabilities = frozenset()
    attributes: Attributes = field(default_factory=dict, hash=False)
    kind: Literal["included_build"] = "included_build"

    def __post_init__(self) -> None:
        self._freeze_capabilities()
        self._validate()

    @property
    def group(self) -> str | None:
        return self.resolved_project.group

    @property
    def artifact(self) -> str:
        return self.resolved_project.artifact

    @property
    def project_path(self) -> str:
        return self.resolved_project.project_path

    @property
    def build_path(self) -> str:
        return self.target_build_path

    def is_for_build(self, build_path: str) -> bool:
        return self.target_build_path == build_path

    def maybe_project_coordinates(self, reference_build_path: str) -> Coordinates:
        if self.is_for_build(reference_build_path):
            return self.resolved_project
        return self


AnyCoordinates = Annotated[
    Union[ModuleCoordinates, ProjectCoordinates, IncludedBuildCoordinates],
    Field(discriminator="kind"),
]


def parse(raw: str) -> Coordinates:
    """Convert a raw string into coordinates.

    Accepted shapes are ``:path:to:project``, ``group:artifact:version`` and
    ``group:artifact``.  Project references are assumed to live in the root
    build ``":"``.
    """
    segments = raw.split(":")
    if raw.startswith(":"):
        if len(segments) < 2 or not all(segments[1:]):
            raise ParseError(raw)
        return ProjectCoordinates(project_path=raw, build_path=":", artifact=segments[-1])
    if len(segments) == 3 and all(segments):
        group, artifact, version = segments
        return ModuleCoordinates(group=group, artifact=artifact, version=version)
    if len(segments) == 2 and all(segments):
        group, artifact = segments
        return ModuleCoordinates(group=group, artifact=artifact)
    raise ParseError(raw)
