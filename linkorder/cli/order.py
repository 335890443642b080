"""CLI command that resolves link plans for a graph definition."""

from __future__ import annotations

import logging
from typing import Dict, Optional

from pydantic import ValidationError
from rich.console import Console
from rich.table import Table

from linkorder.config.loader import load_resolver_config
from linkorder.errors import LinkOrderError
from linkorder.graph.io import export_plans, load_dependency_view
from linkorder.ordering.plan import LinkPlan, LinkPlanner

logger = logging.getLogger("linkorder.cli.order")


def _render_plans(plans: Dict[str, LinkPlan], show_all: bool, console: Console) -> None:
    table = Table(title="Link plans", show_lines=False)
    table.add_column("Unit", style="bold")
    table.add_column("Link order")
    if show_all:
        table.add_column("All dependencies")
    table.add_column("Cycles", justify="right")

    for name, plan in plans.items():
        row = [name, ", ".join(plan.out_ordered) or "-"]
        if show_all:
            row.append(", ".join(plan.all_ordered) or "-")
        row.append(str(len(plan.cycles)))
        table.add_row(*row)

    console.print(table)


def order_command(args, console: Optional[Console] = None) -> int:
    """Execute the order command.

    Args:
        args: Parsed command-line arguments.
        console: Rich console for table output.

    Returns:
        int: Exit code (0 for success, non-zero for failure).
    """
    try:
        config = load_resolver_config(getattr(args, "config", None))
        view = load_dependency_view(args.graph, strict=config.strict_units)

        planner = LinkPlanner(view, config=config)
        units = getattr(args, "units", None) or None
        plans = planner.plan_all(units)

        output = getattr(args, "output", None)
        if output:
            path = export_plans(view, plans, output)
            logger.info("Link plans written to %s", path)
        else:
            _render_plans(plans, getattr(args, "all", False), console or Console())

        cyclic = sum(1 for plan in plans.values() if plan.has_cycles)
        if cyclic:
            logger.warning("%d plan(s) were computed over dependency cycles", cyclic)
        return 0

    except (LinkOrderError, ValidationError, ValueError, OSError) as e:
        logger.error("Order command failed: %s", e)
        return 1
