from __future__ import annotations

import pytest

from datatools_e2e.core import RunContext, Suite


async def _noop(_: RunContext) -> None:
    pass


def test_registrar_applies_default_dependencies() -> None:
    suite = Suite(default_timeout_s=42.0)
    test = suite.registrar()
    test("should load the page")(_noop)
    test("should login", depends_on="should load the page")(_noop)
    post_login = test.extend("should login")
    post_login("should create a project")(_noop)

    case = suite.get("should create a project")
    assert case.dependencies == ("should login",)
    assert case.timeout_s == 42.0
    assert suite.get("should login").dependencies == ("should load the page",)


def test_extend_merges_without_duplicates() -> None:
    suite = Suite()
    for name in ("a", "b", "c"):
        suite.registrar()(name)(_noop)
    base = suite.registrar("a", ["b"])
    extended = base.extend("b", "c")

    assert base.defaults == ("a", "b")
    assert extended.defaults == ("a", "b", "c")

    extended("d", depends_on=["a", "c"], timeout_s=130.0)(_noop)
    case = suite.get("d")
    assert case.dependencies == ("a", "b", "c")
    assert case.timeout_s == 130.0


def test_dependency_must_be_declared_earlier() -> None:
    suite = Suite()
    with pytest.raises(ValueError, match="not declared before it"):
        suite.registrar("later")("first")(_noop)
    assert "first" not in suite


def test_duplicate_names_are_rejected() -> None:
    suite = Suite()
    suite.registrar()("a")(_noop)
    with pytest.raises(ValueError, match="already registered"):
        suite.registrar()("a")(_noop)


def test_select_keeps_declaration_order() -> None:
    suite = Suite()
    test = suite.registrar()
    for name in ("should create route", "should create stop", "should update route data"):
        test(name)(_noop)

    assert [case.name for case in suite.select()] == [case.name for case in suite.cases]
    selected = suite.select(["*route*"])
    assert [case.name for case in selected] == ["should create route", "should update route data"]
    assert len(suite) == 3
