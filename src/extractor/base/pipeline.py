"""Ordered, short-circuiting field resolution shared by every adapter.

A ``FieldPipeline`` runs its steps strictly in order. Each resolver sees the
values resolved so far, so later fields can be keyed on or validated against
earlier ones. The first required step that yields None (or a check that
fails) stops the run and nothing after it executes.
"""

import logging
from collections.abc import Callable, Mapping
from dataclasses import dataclass
from enum import Enum
from typing import Any

logger = logging.getLogger(__name__)

Resolver = Callable[[Mapping[str, Any]], Any]


def _key(name: str | Enum) -> str:
    return name.value if isinstance(name, Enum) else name


@dataclass(frozen=True)
class _Step:
    name: str
    resolver: Resolver
    required: bool = True
    is_check: bool = False


class FieldPipeline:
    """Ordered list of named resolution steps."""

    def __init__(self, label: str):
        self.label = label
        self._steps: list[_Step] = []

    def field(self, name: str | Enum, resolver: Resolver, required: bool = True) -> "FieldPipeline":
        """Add a step whose value is recorded under ``name``.

        Optional steps record None instead of stopping the run.
        """
        self._steps.append(_Step(_key(name), resolver, required))
        return self

    def bind(self, name: str | Enum, resolver: Resolver) -> "FieldPipeline":
        """Add a required intermediate value, such as a located element."""
        return self.field(name, resolver)

    def check(self, name: str | Enum, predicate: Resolver) -> "FieldPipeline":
        """Add a gate that stops the run unless ``predicate`` is truthy."""
        self._steps.append(_Step(_key(name), predicate, is_check=True))
        return self

    def run(self, initial: Mapping[str, Any] | None = None) -> dict[str, Any] | None:
        """Execute the steps in order.

        Args:
        ----
            initial: Values available to the first step

        Returns:
        -------
            Every resolved value keyed by step name, or None when a required
            step was unresolved

        """
        resolved: dict[str, Any] = dict(initial or {})
        for step in self._steps:
            value = step.resolver(resolved)
            if step.is_check:
                if not value:
                    logger.debug(f"{self.label}: check '{step.name}' failed")
                    return None
                continue
            if value is None and step.required:
                logger.debug(f"{self.label}: '{step.name}' unresolved")
                return None
            resolved[step.name] = value
        return resolved
