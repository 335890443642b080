"""Exception hierarchy for linkorder.

Only input boundaries raise: configuration loading, graph definition
parsing and unit lookups. The ordering algorithms themselves never fail.
"""

from typing import Optional


class LinkOrderError(Exception):
    """Base class for all linkorder errors."""
    pass


class GraphDefinitionError(LinkOrderError, ValueError):
    """Dependency graph definition is malformed.

    Raised when a graph file cannot be decoded, a unit declaration fails
    validation, or the compact dependency notation is invalid.
    """
    pass


class UnknownUnitError(GraphDefinitionError, KeyError):
    """A unit identifier is not declared in the dependency graph.

    Attributes:
        unit: The unknown identifier.
        referenced_by: The declaring unit that referenced it, if any.
    """

    def __init__(self, unit: str, referenced_by: Optional[str] = None) -> None:
        self.unit = unit
        self.referenced_by = referenced_by
        super().__init__(unit)

    def __str__(self) -> str:
        if self.referenced_by:
            return f"Unknown unit '{self.unit}' referenced by '{self.referenced_by}'"
        return f"Unknown unit '{self.unit}'"


__all__ = ["GraphDefinitionError", "LinkOrderError", "UnknownUnitError"]
