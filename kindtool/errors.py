"""Errors that carry stack traces, wrapped causes and aggregates of several errors."""

from __future__ import annotations

import traceback
from typing import Iterable, Iterator, List, Optional


class StackError(Exception):
    """An error that records the stack where it was created.

    It may carry a message, a cause, or both. When it has both, its text is
    ``"message: cause"``; with only a cause it reads as the cause.
    """

    def __init__(self, message: Optional[str] = None, cause: Optional[BaseException] = None):
        self.message = message
        self.cause = cause
        self.stack = traceback.extract_stack()[:-1]
        super().__init__(str(self))
        if cause is not None:
            self.__cause__ = cause

    def __str__(self) -> str:
        if self.cause is None:
            return self.message or ""
        if self.message is None:
            return str(self.cause)
        return f"{self.message}: {self.cause}"


class Aggregate(Exception):
    """Several errors held together without a single meaning of their own."""

    def __init__(self, errors: Iterable[BaseException]):
        self.errors: List[BaseException] = list(errors)
        super().__init__()

    def _leaves(self) -> Iterator[BaseException]:
        for err in self.errors:
            if isinstance(err, Aggregate):
                yield from err._leaves()
            else:
                yield err

    def __str__(self) -> str:
        if not self.errors:
            return ""
        if len(self.errors) == 1:
            return str(self.errors[0])
        unique = list(dict.fromkeys(str(err) for err in self._leaves()))
        if len(unique) == 1:
            return unique[0]
        return "[" + ", ".join(unique) + "]"

    def __repr__(self) -> str:
        return f"Aggregate({self.errors!r})"

    def matches(self, target: BaseException) -> bool:
        """Return True if any held error is, or wraps, ``target``."""
        return any(_is(err, target) for err in self._leaves())


def _is(err: BaseException, target: BaseException) -> bool:
    for current in _chain(err):
        if current is target or current == target:
            return True
        if isinstance(current, Aggregate) and current.matches(target):
            return True
    return False


def new(message: str) -> StackError:
    """Return an error with ``message`` and the current stack."""
    return StackError(message)


def new_without_stack(message: str) -> Exception:
    """Return a plain error with ``message`` and no recorded stack."""
    return Exception(message)


def errorf(format: str, *args: object) -> StackError:
    """Return an error with a %-formatted message and the current stack."""
    return StackError(format % args if args else format)


def wrap(err: Optional[BaseException], message: str) -> Optional[StackError]:
    """Annotate ``err`` with ``message`` and a stack; None stays None."""
    if err is None:
        return None
    return StackError(message, err)


def wrapf(err: Optional[BaseException], format: str, *args: object) -> Optional[StackError]:
    """Like :func:`wrap` with a %-formatted message."""
    if err is None:
        return None
    return StackError(format % args if args else format, err)


def with_stack(err: Optional[BaseException]) -> Optional[StackError]:
    """Annotate ``err`` with a stack trace; None stays None."""
    if err is None:
        return None
    return StackError(None, err)


def cause_of(err: Optional[BaseException]) -> Optional[BaseException]:
    """Return the error that ``err`` directly wraps, or None."""
    if err is None:
        return None
    cause = getattr(err, "cause", None)
    if callable(cause):
        cause = cause()
    if cause is err or not isinstance(cause, BaseException):
        return None
    return cause


def _chain(err: Optional[BaseException]) -> Iterator[BaseException]:
    seen = set()
    while err is not None and id(err) not in seen:
        seen.add(id(err))
        yield err
        err = cause_of(err)


def stack_trace(err: Optional[BaseException]) -> Optional[traceback.StackSummary]:
    """Return the deepest recorded stack in the cause chain of ``err``."""
    found = None
    for current in _chain(err):
        stack = getattr(current, "stack", None)
        if isinstance(current, StackError) and stack is not None:
            found = stack
    return found


def _new_aggregate(errlist: Iterable[Optional[BaseException]]) -> Optional[Aggregate]:
    errs = [err for err in errlist if err is not None]
    return Aggregate(errs) if errs else None


def _flatten(agg: Optional[Aggregate]) -> Optional[Aggregate]:
    if agg is None:
        return None
    result: List[BaseException] = []
    for err in agg.errors:
        if isinstance(err, Aggregate):
            flat = _flatten(err)
            if flat is not None:
                result.extend(flat.errors)
        elif err is not None:
            result.append(err)
    return _new_aggregate(result)


def _reduce(err: Optional[BaseException]) -> Optional[BaseException]:
    if isinstance(err, Aggregate):
        if len(err.errors) == 1:
            return err.errors[0]
        if not err.errors:
            return None
    return err


def new_aggregate(errlist: Iterable[Optional[BaseException]]) -> Optional[StackError]:
    """Combine errors into a flattened aggregate wrapped with a stack.

    None entries are dropped; a single remaining error is returned on its own
    (with a stack), and no errors at all gives None.
    """
    return with_stack(_reduce(_flatten(_new_aggregate(errlist))))


def errors_of(err: Optional[BaseException]) -> Optional[List[BaseException]]:
    """Return the errors of the deepest aggregate in the cause chain of ``err``."""
    found = None
    for current in _chain(err):
        if isinstance(current, Aggregate):
            found = current
    return found.errors if found is not None else None