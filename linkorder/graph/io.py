"""Loading graph definitions and exporting link plans.

Graph definition documents (JSON or TOML) list units either as an array::

    {"units": [{"name": "a", "static_deps": ["b"], "shared_deps": []}]}

or as a table keyed by unit name::

    [units.a]
    static_deps = ["b"]
"""

from __future__ import annotations

import json
import logging
from pathlib import Path
from typing import Any, Dict, List, Mapping, Union

from pydantic import ValidationError

from linkorder.config.loader import read_structured_source
from linkorder.errors import GraphDefinitionError
from linkorder.graph.schema import UnitSpec
from linkorder.graph.view import DependencyView
from linkorder.ordering.plan import LinkPlan

logger = logging.getLogger("linkorder.graph.io")

GraphSource = Union[str, Path, Dict[str, Any]]


def _unit_specs(data: Mapping[str, Any]) -> List[UnitSpec]:
    units = data.get("units")
    if units is None:
        raise GraphDefinitionError("Graph definition needs a top-level 'units' entry")

    if isinstance(units, Mapping):
        entries = []
        for name, body in units.items():
            if not isinstance(body, Mapping):
                raise GraphDefinitionError(f"Unit '{name}' must be a table/object")
            entries.append({"name": name, **body})
    elif isinstance(units, list):
        entries = units
    else:
        raise GraphDefinitionError("'units' must be a list or a table")

    try:
        return [UnitSpec.model_validate(entry) for entry in entries]
    except ValidationError as exc:
        raise GraphDefinitionError(f"Invalid unit declaration: {exc}") from exc


def load_dependency_view(source: GraphSource, strict: bool = True) -> DependencyView:
    """Load a DependencyView from a graph definition.

    Args:
        source: Path to a .json/.toml file, inline JSON/TOML text, or an
            already parsed mapping.
        strict: Reject references to undeclared units.

    Raises:
        GraphDefinitionError: If the definition cannot be decoded or is
            invalid.
    """
    if isinstance(source, dict):
        data = source
    else:
        try:
            data, fmt = read_structured_source(source)
        except FileNotFoundError as exc:
            raise GraphDefinitionError(f"Graph definition file not found: {source}") from exc
        except OSError as exc:
            raise GraphDefinitionError(f"Cannot read graph definition: {exc}") from exc
        except ValueError as exc:
            raise GraphDefinitionError(f"Cannot decode graph definition: {exc}") from exc
        logger.debug("Decoded %s graph definition", fmt)

    specs = _unit_specs(data)
    logger.info("Loaded %d unit declaration(s)", len(specs))
    return DependencyView.from_units(specs, strict=strict)


def plans_to_dict(view: DependencyView, plans: Mapping[str, LinkPlan]) -> Dict[str, Any]:
    return {
        "snapshot_id": view.snapshot_id,
        "plans": {name: plan.to_dict() for name, plan in plans.items()},
    }


def export_plans(
    view: DependencyView,
    plans: Mapping[str, LinkPlan],
    output_path: Union[str, Path],
) -> Path:
    """Write plans as JSON and return the output path."""
    path = Path(output_path)
    path.parent.mkdir(parents=True, exist_ok=True)
    path.write_text(
        json.dumps(plans_to_dict(view, plans), indent=2, ensure_ascii=False),
        encoding="utf-8",
    )
    logger.info("Exported %d link plan(s) to %s", len(plans), path)
    return path


__all__ = ["GraphSource", "export_plans", "load_dependency_view", "plans_to_dict"]
