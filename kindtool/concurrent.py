"""Running callables concurrently and collecting the errors they raise."""

from __future__ import annotations

import queue
import threading
from typing import Callable, Iterable, List, Optional

from kindtool.errors import new_aggregate


def _run(func: Callable[[], object], results: "queue.Queue[Optional[Exception]]") -> None:
    try:
        func()
    except Exception as exc:  # noqa: BLE001 - every failure is reported to the caller
        results.put(exc)
    else:
        results.put(None)


def _start(funcs: List[Callable[[], object]], results: "queue.Queue[Optional[Exception]]") -> List[threading.Thread]:
    threads = [threading.Thread(target=_run, args=(func, results), daemon=True) for func in funcs]
    for thread in threads:
        thread.start()
    return threads


def until_error_concurrent(funcs: Iterable[Callable[[], object]]) -> None:
    """Run all ``funcs`` in threads and raise the first error any of them raises.

    Returns as soon as an error arrives, without waiting for the rest.
    """
    funcs = list(funcs)
    results: "queue.Queue[Optional[Exception]]" = queue.Queue()
    _start(funcs, results)
    for _ in funcs:
        err = results.get()
        if err is not None:
            raise err


def aggregate_concurrent(funcs: Iterable[Callable[[], object]]) -> None:
    """Run all ``funcs`` in threads, wait for every one, and raise their errors.

    A single error is raised as it is; several are raised as an aggregate.
    """
    funcs = list(funcs)
    results: "queue.Queue[Optional[Exception]]" = queue.Queue()
    for thread in _start(funcs, results):
        thread.join()
    errs = [err for err in (results.get() for _ in funcs) if err is not None]
    if len(errs) > 1:
        raise new_aggregate(errs)
    if errs:
        raise errs[0]