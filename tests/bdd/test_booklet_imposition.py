"""Behaviour tests for saddle-stitch booklet imposition using pytest-bdd.

These scenarios describe how logical pages land on printed sheets: the book
is padded to whole signatures, each sheet pairs outer and inner pages, and an
unusable signature size is rejected with the offending configuration field.

Usage
-----
Run ``pytest tests/bdd/test_booklet_imposition.py -v``.
"""

from __future__ import annotations

import typing as typ
from pathlib import Path

import pytest
from pytest_bdd import given, parsers, scenarios, then, when

from src_press.config import ConfigurationError
from src_press.imposition import plan_imposition

if typ.TYPE_CHECKING:
    from src_press.models import ImpositionPlan

FEATURE_FILE = (
    Path(__file__).resolve().parents[2] / "features" / "booklet_imposition.feature"
)
scenarios(FEATURE_FILE)

ScenarioState = dict[str, typ.Any]


@pytest.fixture
def scenario_state() -> ScenarioState:
    """Share mutable scenario data across pytest-bdd steps."""
    return {}


@given(parsers.parse("a book of {pages:d} pages"))
def given_book(scenario_state: ScenarioState, pages: int) -> None:
    scenario_state["pages"] = pages


@given(parsers.parse("signatures of {size:d} pages"))
def given_signature_size(scenario_state: ScenarioState, size: int) -> None:
    scenario_state["size"] = size


@when("the imposition is planned")
def when_planned(scenario_state: ScenarioState) -> None:
    """Plan the imposition, keeping any configuration error for later steps."""
    try:
        scenario_state["plan"] = plan_imposition(
            scenario_state["pages"], scenario_state["size"]
        )
    except ConfigurationError as exc:
        scenario_state["error"] = exc


@then(
    parsers.parse(
        "the book is padded to {padded:d} pages in {signatures:d} signatures"
    )
)
def then_padded(scenario_state: ScenarioState, padded: int, signatures: int) -> None:
    plan = typ.cast("ImpositionPlan", scenario_state["plan"])
    assert plan.padded_page_count == padded, (
        f"expected {padded} padded pages, got {plan.padded_page_count}"
    )
    assert len(plan.signatures) == signatures, (
        f"expected {signatures} signatures, got {len(plan.signatures)}"
    )


@then(
    parsers.parse(
        "sheet {sheet:d} of signature {signature:d} prints pages "
        "{left:d} and {right:d} on the {side}"
    )
)
def then_sheet_side(
    scenario_state: ScenarioState,
    sheet: int,
    signature: int,
    left: int,
    right: int,
    side: str,
) -> None:
    plan = typ.cast("ImpositionPlan", scenario_state["plan"])
    printed = plan.signatures[signature - 1].sheets[sheet - 1]
    pair = printed.front if side == "front" else printed.back
    assert pair == (left, right), f"expected {(left, right)} on the {side}, got {pair}"


@then("every page appears exactly once")
def then_every_page_once(scenario_state: ScenarioState) -> None:
    plan = typ.cast("ImpositionPlan", scenario_state["plan"])
    slots = [
        page
        for signature in plan.signatures
        for sheet in signature.sheets
        for page in (*sheet.front, *sheet.back)
    ]
    pages = sorted(page for page in slots if page is not None)
    assert pages == list(range(1, plan.page_count + 1)), "real pages placed once"
    assert slots.count(None) == plan.blank_count, "padding fills the remainder"


@then(parsers.parse('planning fails for "{field}"'))
def then_planning_fails(scenario_state: ScenarioState, field: str) -> None:
    error = scenario_state.get("error")
    assert isinstance(error, ConfigurationError), "a configuration error is raised"
    assert error.field == field, f"expected field {field}, got {error.field}"
