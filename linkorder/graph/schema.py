"""Canonical unit declaration models.

A unit declares two ordered dependency lists: static archives it links
and shared objects it loads. Declaration order is significant and kept
exactly as authored; duplicates are allowed.
"""

from __future__ import annotations

import logging
from enum import Enum
from typing import Dict, List

from pydantic import BaseModel, ConfigDict, Field, field_validator

from linkorder.errors import GraphDefinitionError

logger = logging.getLogger("linkorder.graph.schema")


class DepKind(str, Enum):
    """Kind of a declared dependency edge.

    Attributes:
        STATIC: Archive copied into the dependent at link time. Its
            position on the link line matters.
        SHARED: Dynamically linked library. Its own static dependencies are
            resolved when the shared object itself is linked.
    """

    STATIC = "static"
    SHARED = "shared"


class UnitSpec(BaseModel):
    """Declaration of a single library unit.

    Attributes:
        name: Stable unit identifier.
        static_deps: Directly declared static dependencies, in order.
        shared_deps: Directly declared shared dependencies, in order.
    """

    model_config = ConfigDict(frozen=True, extra="forbid")

    name: str = Field(min_length=1)
    static_deps: List[str] = Field(default_factory=list)
    shared_deps: List[str] = Field(default_factory=list)

    @field_validator("name")
    @classmethod
    def _strip_name(cls, v: str) -> str:
        v = v.strip()
        if not v:
            raise ValueError("unit name must not be blank")
        return v

    @field_validator("static_deps", "shared_deps")
    @classmethod
    def _validate_dep_names(cls, v: List[str]) -> List[str]:
        """Strip dependency names and reject blank ones; keep order and dups."""
        cleaned = []
        for dep in v:
            dep = dep.strip()
            if not dep:
                raise ValueError("dependency names must not be blank")
            cleaned.append(dep)
        return cleaned

    def deps_of(self, kind: DepKind) -> List[str]:
        """Return the declared list for an edge kind."""
        if kind == DepKind.STATIC:
            return self.static_deps
        return self.shared_deps


def parse_dep_string(text: str) -> Dict[str, List[str]]:
    """Parse the compact ``"a:b,c; b:d; d:"`` dependency notation.

    Whitespace is ignored. Every ``;``-separated entry must contain exactly
    one ``:``; an empty right-hand side declares a unit with no deps.

    Args:
        text: Dependency string.

    Returns:
        Dict[str, List[str]]: Ordered mapping of unit name to its deps.

    Raises:
        GraphDefinitionError: If an entry is malformed.
    """
    stripped = "".join(text.split())
    if not stripped:
        return {}

    result: Dict[str, List[str]] = {}
    for entry in stripped.split(";"):
        if not entry:
            continue
        components = entry.split(":")
        if len(components) != 2 or not components[0]:
            raise GraphDefinitionError(
                f"Illegal dependency entry {entry!r} in {text!r}; "
                "expected exactly one ':' after a unit name"
            )
        name, dep_text = components
        result[name] = [dep for dep in dep_text.split(",") if dep] if dep_text else []
    return result


__all__ = ["DepKind", "UnitSpec", "parse_dep_string"]
