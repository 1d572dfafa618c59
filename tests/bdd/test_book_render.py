"""Behaviour tests for the ``src-press render`` command using pytest-bdd.

The scenarios plan a small repository served by an in-memory provider in
place of git, then check the JSON plan and HTML proof on disk. Strict mode
must stop before anything is written when a line does not fit the page.
"""

from __future__ import annotations

import typing as typ
from pathlib import Path
from textwrap import dedent

import msgspec
import pytest
from bs4 import BeautifulSoup
from pytest_bdd import given, parsers, scenarios, then, when

from src_press import cli

if typ.TYPE_CHECKING:
    from pytest_mock import MockerFixture

    from src_press.models import CommitRecord

    from conftest import FakeRepository

FEATURE_FILE = Path(__file__).resolve().parents[2] / "features" / "book_render.feature"
scenarios(FEATURE_FILE)

ScenarioState = dict[str, typ.Any]


@pytest.fixture
def scenario_state() -> ScenarioState:
    """Share mutable scenario data across pytest-bdd steps.

    Returns
    -------
    ScenarioState
        Dictionary exchanging the repository, configuration and output paths
        between ``given``, ``when`` and ``then`` steps.
    """
    return {}


def _serve(mocker: MockerFixture, repo: FakeRepository, state: ScenarioState) -> None:
    mocker.patch("src_press.planner.GitRepository", return_value=repo)
    state["repo"] = repo


@given("a repository with a readme and two Python modules")
def given_sample_repository(
    make_repository: typ.Callable[..., FakeRepository],
    sample_files: dict[str, str],
    sample_commits: list[CommitRecord],
    mocker: MockerFixture,
    scenario_state: ScenarioState,
) -> None:
    _serve(mocker, make_repository(sample_files, commits=sample_commits), scenario_state)


@given("a repository with a line wider than the page")
def given_wide_repository(
    make_repository: typ.Callable[..., FakeRepository],
    mocker: MockerFixture,
    scenario_state: ScenarioState,
) -> None:
    files = {"src/main.py": "print('" + "x" * 120 + "')\n"}
    _serve(mocker, make_repository(files), scenario_state)


@given("a configuration requesting an HTML proof")
def given_configuration(tmp_path: Path, scenario_state: ScenarioState) -> None:
    """Write ``src-press.toml`` next to the repository with an ``[html]`` table."""
    repo = typ.cast("FakeRepository", scenario_state["repo"])
    config_path = tmp_path / "src-press.toml"
    config_path.write_text(
        dedent(
            f"""
            [source]
            title = "Demo"
            repository = "{repo.root.name}"
            entrypoint = "src/main.py"

            [html]
            outfile = "out/proof.html"
            """
        ).lstrip(),
        encoding="utf-8",
    )
    scenario_state["config_path"] = config_path
    scenario_state["plan_path"] = tmp_path / "out" / "plan.json"
    scenario_state["html_path"] = tmp_path / "out" / "proof.html"


@when("I render the book")
def when_render(scenario_state: ScenarioState) -> None:
    cli.render(
        config=scenario_state["config_path"], plan=scenario_state["plan_path"]
    )


@when("I render the book strictly")
def when_render_strictly(scenario_state: ScenarioState) -> None:
    """Run ``render --strict`` and keep the exit status."""
    with pytest.raises(SystemExit) as excinfo:
        cli.render(
            config=scenario_state["config_path"],
            plan=scenario_state["plan_path"],
            strict=True,
        )
    scenario_state["exit_code"] = excinfo.value.code


@then(parsers.parse("the plan lists {count:d} pages"))
def then_plan_pages(scenario_state: ScenarioState, count: int) -> None:
    plan_path = typ.cast("Path", scenario_state["plan_path"])
    payload = msgspec.json.decode(plan_path.read_bytes())
    assert payload["page_count"] == count, (
        f"expected {count} pages, got {payload['page_count']}"
    )
    assert len(payload["pages"]) == count, "one slot per page"


@then(parsers.parse('the proof contains an article for "{path}"'))
def then_proof_article(scenario_state: ScenarioState, path: str) -> None:
    html_path = typ.cast("Path", scenario_state["html_path"])
    soup = BeautifulSoup(html_path.read_text(encoding="utf-8"), "html.parser")
    assert soup.select_one(f'article[data-path="{path}"]') is not None, (
        f"no article for {path} in the proof"
    )


@then(parsers.parse("the command exits with status {status:d}"))
def then_exit_status(scenario_state: ScenarioState, status: int) -> None:
    assert scenario_state["exit_code"] == status, (
        f"expected exit status {status}, got {scenario_state['exit_code']}"
    )


@then("no plan is written")
def then_no_plan(scenario_state: ScenarioState) -> None:
    plan_path = typ.cast("Path", scenario_state["plan_path"])
    html_path = typ.cast("Path", scenario_state["html_path"])
    assert not plan_path.exists(), "strict mode must not write the plan"
    assert not html_path.exists(), "strict mode must not write the proof"
