from __future__ import annotations

import dataclasses
from typing import Any, Callable, List

from futcalc.calculator import compute, input_warnings, is_liquidation_risky
from futcalc.models import Direction, InputWarning, PositionInputs, PositionMetrics

Subscriber = Callable[[PositionInputs, PositionMetrics], None]

_FIELDS = frozenset(f.name for f in dataclasses.fields(PositionInputs))


class CalculatorSession:
    """
    Current inputs of one calculator plus their derived metrics.

    Every input change recomputes the metrics and pushes them to subscribers,
    so metrics are never stale relative to inputs.
    """

    def __init__(self, inputs: PositionInputs) -> None:
        self._inputs = inputs
        self._metrics = compute(inputs)
        self._subscribers: List[Subscriber] = []

    @property
    def inputs(self) -> PositionInputs:
        return self._inputs

    @property
    def metrics(self) -> PositionMetrics:
        return self._metrics

    @property
    def liquidation_risky(self) -> bool:
        return is_liquidation_risky(self._inputs, self._metrics)

    @property
    def warnings(self) -> List[InputWarning]:
        return input_warnings(self._inputs)

    def subscribe(self, callback: Subscriber) -> Callable[[], None]:
        self._subscribers.append(callback)

        def _unsubscribe() -> None:
            if callback in self._subscribers:
                self._subscribers.remove(callback)

        return _unsubscribe

    def update(self, **changes: Any) -> PositionMetrics:
        unknown = set(changes) - _FIELDS
        if unknown:
            raise TypeError(f"Unknown input field(s): {', '.join(sorted(unknown))}")

        if all(getattr(self._inputs, k) == v for k, v in changes.items()):
            return self._metrics

        self._set(dataclasses.replace(self._inputs, **changes))
        return self._metrics

    def set_direction(self, direction: Direction) -> PositionMetrics:
        return self.update(direction=direction)

    def reset(self, inputs: PositionInputs) -> PositionMetrics:
        self._set(inputs)
        return self._metrics

    def _set(self, inputs: PositionInputs) -> None:
        self._inputs = inputs
        self._metrics = compute(inputs)
        for callback in list(self._subscribers):
            callback(self._inputs, self._metrics)
