"""CLI command to inspect static dependency cycles.

Cycles among static archives cannot be linked correctly in one pass. This
command reports them and, when requested, fails the process so that CI
pipelines can keep the graph acyclic.
"""

from __future__ import annotations

import logging
from typing import List, Optional

from pydantic import ValidationError

from linkorder.config.loader import load_resolver_config
from linkorder.errors import LinkOrderError
from linkorder.graph.cycles import find_static_cycles
from linkorder.graph.io import load_dependency_view

logger = logging.getLogger("linkorder.cli.cycles")


def cycles_command(args) -> int:
    """Execute the cycles command.

    Args:
        args: Parsed command-line arguments.

    Returns:
        int: Exit code (0 for success, non-zero for failure).
    """
    try:
        config = load_resolver_config(getattr(args, "config", None))
        view = load_dependency_view(args.graph, strict=config.strict_units)

        # Interpret limit: <= 0 means "no limit".
        limit_arg = getattr(args, "limit", None)
        limit: Optional[int] = limit_arg if isinstance(limit_arg, int) and limit_arg > 0 else None

        cycles: List[List[str]] = find_static_cycles(view, limit=limit)
        if not cycles:
            logger.info("No static dependency cycles among %d unit(s)", len(view))
            print("No static dependency cycles found.")
            return 0

        logger.warning("Detected %d static dependency cycle group(s)", len(cycles))
        for idx, members in enumerate(cycles, start=1):
            print(f"Cycle {idx} ({len(members)} units): {', '.join(members)}")

        if getattr(args, "fail_on_cycle", False):
            logger.error("Validation failed: static dependency cycles detected")
            return 1
        return 0

    except (LinkOrderError, ValidationError, ValueError, OSError) as e:
        logger.error("Cycles command failed: %s", e)
        return 1
