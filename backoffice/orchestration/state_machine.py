"""Canonical state transition helpers for pipeline entities."""

from __future__ import annotations

from collections.abc import Hashable, Mapping


class InvalidTransitionError(ValueError):
    """Raised when a disallowed state transition is asserted."""


class StateMachine:
    """Transition table shared by quotes, orders and invoices."""

    def __init__(self, transitions: Mapping[Hashable, set]) -> None:
        self._transitions = transitions

    def can_transition(self, current: Hashable, target: Hashable) -> bool:
        return target in self._transitions.get(current, set())

    def allowed_targets(self, current: Hashable) -> set:
        return set(self._transitions.get(current, set()))

    def is_terminal(self, state: Hashable) -> bool:
        return not self._transitions.get(state)

    def assert_transition(self, current: Hashable, target: Hashable) -> None:
        if not self.can_transition(current=current, target=target):
            raise InvalidTransitionError(f"Transition not allowed: {current} -> {target}")
