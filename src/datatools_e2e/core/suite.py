"""Ordered test registry and dependency-set builders."""
from __future__ import annotations

import fnmatch
from typing import Callable, Dict, Iterable, List, Sequence, Tuple, Union

from .models import TestBody, TestCase

DependencySpec = Union[str, Sequence[str]]


def as_names(spec: DependencySpec) -> Tuple[str, ...]:
    """Accept a single test name or a sequence of names."""
    if isinstance(spec, str):
        return (spec,)
    return tuple(spec)


def merge_names(*groups: Iterable[str]) -> Tuple[str, ...]:
    merged: List[str] = []
    for group in groups:
        for name in group:
            if name not in merged:
                merged.append(name)
    return tuple(merged)


class Suite:
    """Test cases kept in declaration order.

    Dependencies must name tests that were registered earlier; nothing is
    ever reordered.
    """

    def __init__(self, *, default_timeout_s: float = 100.0) -> None:
        self.default_timeout_s = default_timeout_s
        self._cases: List[TestCase] = []
        self._index: Dict[str, TestCase] = {}

    def add(self, case: TestCase) -> TestCase:
        if case.name in self._index:
            raise ValueError(f"Test '{case.name}' already registered")
        for dependency in case.dependencies:
            if dependency not in self._index:
                raise ValueError(
                    f"Test '{case.name}' depends on '{dependency}', which is not declared before it"
                )
        self._cases.append(case)
        self._index[case.name] = case
        return case

    def registrar(self, *defaults: DependencySpec) -> "Registrar":
        return Registrar(self, merge_names(*(as_names(spec) for spec in defaults)))

    def get(self, name: str) -> TestCase:
        return self._index[name]

    def select(self, patterns: Sequence[str] = ()) -> List[TestCase]:
        if not patterns:
            return list(self._cases)
        return [case for case in self._cases if any(fnmatch.fnmatchcase(case.name, p) for p in patterns)]

    @property
    def cases(self) -> Tuple[TestCase, ...]:
        return tuple(self._cases)

    def __len__(self) -> int:
        return len(self._cases)

    def __contains__(self, name: object) -> bool:
        return name in self._index


class Registrar:
    """Registers tests that implicitly depend on a default set of tests."""

    def __init__(self, suite: Suite, defaults: Tuple[str, ...] = tuple()) -> None:
        self._suite = suite
        self.defaults = defaults

    def extend(self, *dependencies: DependencySpec) -> "Registrar":
        extra = merge_names(*(as_names(spec) for spec in dependencies))
        return Registrar(self._suite, merge_names(self.defaults, extra))

    def __call__(
        self,
        name: str,
        *,
        timeout_s: float | None = None,
        depends_on: DependencySpec = (),
    ) -> Callable[[TestBody], TestBody]:
        def decorator(body: TestBody) -> TestBody:
            self._suite.add(
                TestCase(
                    name=name,
                    body=body,
                    timeout_s=timeout_s if timeout_s is not None else self._suite.default_timeout_s,
                    dependencies=merge_names(self.defaults, as_names(depends_on)),
                )
            )
            return body

        return decorator
