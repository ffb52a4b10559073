# pageobject/assertions/base.py
from __future__ import annotations

"""Assertion runner
-------------------
Runs assertion definitions that follow the assertion contract:

    expected() -> str
    format_message() -> (message, args)      # message uses %s placeholders
    evaluate(value) -> bool
    value(result) -> Any
    command(callback)                        # fetches data, calls callback(result)

The runner sets `negate` and `api` (the client) on the definition before use.
"""

from collections.abc import Mapping
from dataclasses import dataclass
from typing import Any, Callable, List, Sequence, Tuple

from pageobject.utils.logger import get_logger

log = get_logger(__name__)

__all__ = ["AssertionOutcome", "run_assertion", "unpack_assertion_args"]


@dataclass
class AssertionOutcome:
    passed: bool
    message: str
    expected: str
    actual: Any


def unpack_assertion_args(args: Sequence[Any]) -> Tuple[List[Any], bool]:
    """Split the structured `{"negate": ..., "args": [...]}` form used by `.not_`."""
    if len(args) == 1 and isinstance(args[0], Mapping) and isinstance(args[0].get("args"), list):
        return list(args[0]["args"]), bool(args[0].get("negate", False))
    return list(args), False


def _fill_placeholders(message: str, args: Sequence[Any]) -> str:
    for arg in args:
        message = message.replace("%s", str(arg), 1)
    return message


def run_assertion(
    factory: Callable[..., Any],
    client: Any,
    *args: Any,
    negate: bool = False,
    abort_on_failure: bool = True,
) -> AssertionOutcome:
    """
    Instantiate `factory(*args)`, fetch its data and evaluate it.

    On failure raises AssertionError when `abort_on_failure`, otherwise records
    the failure on `client.soft_failures` (when the client keeps one) and
    returns the failed outcome.
    """
    assertion = factory(*args)
    assertion.negate = negate
    assertion.api = client

    captured: List[Any] = []
    assertion.command(captured.append)
    if not captured:
        raise RuntimeError(f"{type(assertion).__name__}.command() did not call back with a result")

    actual = assertion.value(captured[0])
    passed = bool(assertion.evaluate(actual))
    if negate:
        passed = not passed

    message, message_args = assertion.format_message()
    outcome = AssertionOutcome(
        passed=passed,
        message=_fill_placeholders(message, message_args),
        expected=assertion.expected(),
        actual=actual,
    )

    if passed:
        log.info(f"PASS {outcome.message}")
        return outcome

    detail = f'{outcome.message} - expected "{outcome.expected}" but got: "{actual}"'
    if abort_on_failure:
        log.error(f"FAIL {detail}")
        raise AssertionError(detail)

    log.warning(f"FAIL (soft) {detail}")
    soft_failures = getattr(client, "soft_failures", None)
    if soft_failures is not None:
        soft_failures.append(detail)
    return outcome
