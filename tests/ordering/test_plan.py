"""Tests for LinkPlan computation and memoisation."""

from __future__ import annotations

import logging
import threading
from concurrent.futures import ThreadPoolExecutor

import pytest

from linkorder.config import ResolverConfig
from linkorder.errors import UnknownUnitError
from linkorder.graph import DependencyView, parse_dep_string
from linkorder.ordering import LinkPlan, LinkPlanner, PlanCache


def _view(in_static: str, in_shared: str = "") -> DependencyView:
    return DependencyView.from_mapping(
        parse_dep_string(in_static), parse_dep_string(in_shared)
    )


def test_plan_pairs_link_order_and_closure() -> None:
    view = _view("bin:lib2,lib1; lib1:lib2,liboptional", "bin:libshared")
    plan = LinkPlanner(view).plan("bin")

    assert plan.unit == "bin"
    assert plan.out_ordered == ("lib1", "lib2")
    assert plan.all_ordered == ("lib1", "lib2", "liboptional", "libshared")
    assert plan.static_ordered == ("lib1", "lib2", "liboptional")
    assert plan.link_line() == ("bin", "lib1", "lib2", "liboptional")
    assert plan.snapshot_id == view.snapshot_id
    assert not plan.has_cycles


def test_plan_to_dict() -> None:
    plan = LinkPlanner(_view("a:b; b:a")).plan("a")

    assert plan.to_dict() == {
        "unit": "a",
        "out_ordered": ["b"],
        "all_ordered": ["b", "a"],
        "static_ordered": ["b", "a"],
        "cycles": [["b", "a"]],
    }
    assert plan.link_line() == ("a", "b")


def test_plans_are_memoised_per_unit() -> None:
    planner = LinkPlanner(_view("a:b,c; c:b"))

    first = planner.plan("a")

    assert planner.plan("a") is first
    assert len(planner.cache) == 1
    assert (planner.view.snapshot_id, "a") in planner.cache


def test_caching_can_be_disabled() -> None:
    planner = LinkPlanner(_view("a:b,c; c:b"), ResolverConfig(enable_caching=False))

    first = planner.plan("a")
    second = planner.plan("a")

    assert first == second
    assert first is not second
    assert len(planner.cache) == 0


def test_concurrent_callers_compute_once(monkeypatch: pytest.MonkeyPatch) -> None:
    planner = LinkPlanner(_view("a:b,c,d; c:b"))
    calls = []
    original = planner._compute
    gate = threading.Event()

    def slow_compute(unit: str) -> LinkPlan:
        calls.append(unit)
        gate.wait(timeout=1.0)
        return original(unit)

    monkeypatch.setattr(planner, "_compute", slow_compute)

    with ThreadPoolExecutor(max_workers=8) as executor:
        futures = [executor.submit(planner.plan, "a") for _ in range(16)]
        gate.set()
        plans = [future.result() for future in futures]

    assert calls == ["a"]
    assert all(plan is plans[0] for plan in plans)


def test_new_snapshot_never_reuses_old_plans() -> None:
    old_view = _view("a:b,c")
    new_view = _view("a:b,c; c:b")
    planner = LinkPlanner(old_view)

    old_plan = planner.plan("a")
    new_plan = planner.with_view(new_view).plan("a")

    assert old_plan.out_ordered == ("b", "c")
    assert new_plan.out_ordered == ("c", "b")
    assert len(planner.cache) == 2
    assert planner.plan("a") is old_plan


def test_invalidate_drops_only_own_snapshot() -> None:
    cache = PlanCache()
    first = LinkPlanner(_view("a:b"), cache=cache)
    second = LinkPlanner(_view("a:c"), cache=cache)
    first.plan("a")
    first.plan("b")
    second.plan("a")

    assert first.invalidate() == 2
    assert len(cache) == 1
    assert cache.invalidate() == 1


def test_plan_all_preserves_request_order() -> None:
    view = _view("a:d,b,c; b:d; c:d; d:")
    planner = LinkPlanner(view, ResolverConfig(max_workers=4))

    plans = planner.plan_all(["d", "a", "c", "a"])

    assert list(plans) == ["d", "a", "c"]
    assert plans["a"].out_ordered == ("b", "c", "d")


def test_plan_all_defaults_to_every_unit() -> None:
    view = _view("a:b; b:c")
    sequential = LinkPlanner(view, ResolverConfig(max_workers=1)).plan_all()
    parallel = LinkPlanner(view, ResolverConfig(max_workers=3)).plan_all()

    assert list(sequential) == ["a", "b", "c"]
    assert sequential == parallel


def test_cycle_warning_is_logged(caplog: pytest.LogCaptureFixture) -> None:
    planner = LinkPlanner(_view("a:b; b:c; c:a"))

    with caplog.at_level(logging.WARNING, logger="linkorder.ordering.plan"):
        plan = planner.plan("a")

    assert plan.out_ordered == ("b",)
    assert any("b -> c -> a -> b" in record.getMessage() for record in caplog.records)


def test_cycle_warning_is_logged_once_per_plan(caplog: pytest.LogCaptureFixture) -> None:
    planner = LinkPlanner(_view("a:b,c; b:c,a; c:a,b"))

    with caplog.at_level(logging.WARNING, logger="linkorder.ordering.plan"):
        plan = planner.plan("a")
        planner.plan("a")

    assert len(plan.cycles) > 1
    warnings = [r for r in caplog.records if r.name == "linkorder.ordering.plan"]
    assert len(warnings) == 1
    for cycle in plan.cycles:
        assert " -> ".join(cycle + (cycle[0],)) in warnings[0].getMessage()


def test_link_line_respects_shared_dependency_order() -> None:
    plan = LinkPlanner(_view("a:b,c; b:; c:", "c:b")).plan("a")

    assert plan.out_ordered == ("c", "b")
    assert plan.static_ordered == ("c", "b")
    assert plan.link_line() == ("a", "c", "b")
    assert plan.all_ordered == ("c", "b")


def test_cycle_warning_can_be_silenced(caplog: pytest.LogCaptureFixture) -> None:
    planner = LinkPlanner(_view("a:a"), ResolverConfig(warn_on_cycle=False))

    with caplog.at_level(logging.WARNING, logger="linkorder.ordering.plan"):
        plan = planner.plan("a")

    assert plan.cycles == (("a",),)
    assert not caplog.records


def test_static_closure_can_be_left_out() -> None:
    planner = LinkPlanner(_view("a:b; b:c"), ResolverConfig(include_static_closure=False))

    plan = planner.plan("a")

    assert plan.static_ordered == ()
    assert plan.all_ordered == ("b", "c")


def test_unknown_unit_propagates() -> None:
    with pytest.raises(UnknownUnitError):
        LinkPlanner(_view("a:b")).plan("zzz")
