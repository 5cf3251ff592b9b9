"""
Requests on counters: ``/v2/counters/{name}``.

    counters.create_strong("hits").with_value(10)
    counters.increment("hits").by(2)
    counters.compare_and_set("hits", 12, 20)
"""
from dataclasses import dataclass, replace
from typing import Optional

from ..configuration import (
    CounterConfiguration,
    CounterStorage,
    StrongCounter,
    WeakCounter,
    counter_config_to_json,
)
from ..errors import InvalidRequestError
from ..types import HttpMethod
from .base import COUNTERS_PATH, Request, require_name

JSON = "application/json"


def _int(value: object, what: str) -> int:
    if isinstance(value, bool) or not isinstance(value, int):
        raise InvalidRequestError(f"{what} must be an integer, got {value!r}")
    return value


def _counter(method: HttpMethod, name: str, action: Optional[str] = None) -> Request:
    req = Request(method=method, resource=COUNTERS_PATH, names=(require_name(name, "counter name"),))
    if action:
        req = req.with_query("action", action)
    return req


@dataclass(frozen=True)
class CreateCounter(Request):
    """Counter creation; the body always mirrors ``counter``."""

    counter: Optional[CounterConfiguration] = None

    def _with_counter(self, counter: CounterConfiguration) -> "CreateCounter":
        try:
            body = counter_config_to_json(counter)
        except (TypeError, ValueError) as e:
            raise InvalidRequestError(f"Invalid counter configuration: {e}") from e
        return replace(self, counter=counter).with_body(body, JSON)

    def with_value(self, initial_value: int) -> "CreateCounter":
        """Initial value of the counter (0 when not set)."""
        return self._with_counter(
            replace(self.counter, initial_value=_int(initial_value, "initial value"))
        )

    def with_storage(self, storage: CounterStorage) -> "CreateCounter":
        try:
            storage = CounterStorage(storage)
        except ValueError:
            raise InvalidRequestError(f"Unknown counter storage: {storage!r}") from None
        return self._with_counter(replace(self.counter, storage=storage))

    def with_concurrency_level(self, level: int) -> "CreateCounter":
        """Weak counters only."""
        if not isinstance(self.counter, WeakCounter):
            raise InvalidRequestError("concurrency level applies to weak counters only")
        if _int(level, "concurrency level") < 1:
            raise InvalidRequestError(f"concurrency level must be at least 1, got {level}")
        return self._with_counter(replace(self.counter, concurrency_level=level))

    def with_bounds(self, lower: Optional[int] = None, upper: Optional[int] = None) -> "CreateCounter":
        """Strong counters only. ``None`` leaves that side unbounded."""
        if not isinstance(self.counter, StrongCounter):
            raise InvalidRequestError("bounds apply to strong counters only")
        if lower is not None:
            _int(lower, "lower bound")
        if upper is not None:
            _int(upper, "upper bound")
        if lower is not None and upper is not None and lower > upper:
            raise InvalidRequestError(f"lower bound {lower} is above upper bound {upper}")
        return self._with_counter(replace(self.counter, lower_bound=lower, upper_bound=upper))


@dataclass(frozen=True)
class IncrementCounter(Request):
    """Increment by one, or by an arbitrary delta with ``by``."""

    def by(self, delta: int) -> "IncrementCounter":
        return self.with_query("action", "add").with_query("delta", _int(delta, "delta"))


def create(name: str, config: CounterConfiguration) -> CreateCounter:
    req = CreateCounter(method="POST", resource=COUNTERS_PATH, names=(require_name(name, "counter name"),))
    return req._with_counter(config)


def create_weak(name: str) -> CreateCounter:
    return create(name, WeakCounter())


def create_strong(name: str) -> CreateCounter:
    return create(name, StrongCounter())


def get(name: str) -> Request:
    """Current value, as plain text."""
    return _counter("GET", name)


def get_config(name: str) -> Request:
    return replace(_counter("GET", name), suffix="/config")


def increment(name: str) -> IncrementCounter:
    return IncrementCounter(
        method="POST", resource=COUNTERS_PATH, names=(require_name(name, "counter name"),)
    ).with_query("action", "increment")


def decrement(name: str) -> Request:
    return _counter("POST", name, "decrement")


def add(name: str, delta: int) -> Request:
    return _counter("POST", name, "add").with_query("delta", _int(delta, "delta"))


def reset(name: str) -> Request:
    """Back to the counter's initial value."""
    return _counter("POST", name, "reset")


def delete(name: str) -> Request:
    return _counter("DELETE", name)


def list() -> Request:
    return Request(method="GET", resource=COUNTERS_PATH)


def compare_and_set(name: str, expected: int, new: int) -> Request:
    """Set to ``new`` if the value is ``expected``; the server answers ``true``/``false``."""
    return (
        _counter("POST", name, "compareAndSet")
        .with_query("expect", _int(expected, "expected value"))
        .with_query("update", _int(new, "new value"))
    )


def compare_and_swap(name: str, expected: int, new: int) -> Request:
    """Set to ``new`` if the value is ``expected``; the server answers the value it compared against."""
    return (
        _counter("POST", name, "compareAndSwap")
        .with_query("expect", _int(expected, "expected value"))
        .with_query("update", _int(new, "new value"))
    )
