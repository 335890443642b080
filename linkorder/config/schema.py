"""Configuration schema definitions using Pydantic for validation.

Configuration errors are caught when the config is loaded, with clear
messages, instead of surfacing halfway through a planning run.
"""

from typing import Any, Dict

from pydantic import BaseModel, Field


class ResolverConfig(BaseModel):
    """Top-level configuration for link-plan resolution.

    Attributes:
        max_workers: Worker threads used by ``LinkPlanner.plan_all``.
        enable_caching: Memoise plans per snapshot and unit.
        warn_on_cycle: Log a warning for every plan whose static
            dependencies contain a cycle.
        strict_units: Reject references to undeclared units when loading
            graph definitions.
        include_static_closure: Populate ``LinkPlan.static_ordered`` with
            the full transitive static order.
    """

    max_workers: int = Field(default=8, ge=1, le=64)
    enable_caching: bool = True
    warn_on_cycle: bool = True
    strict_units: bool = True
    include_static_closure: bool = True

    model_config = {"extra": "forbid"}

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "ResolverConfig":
        """Create configuration from dictionary.

        Raises:
            ValidationError: If configuration is invalid.
        """
        return cls.model_validate(data)

    def to_dict(self) -> Dict[str, Any]:
        """Convert configuration to dictionary."""
        return self.model_dump()
