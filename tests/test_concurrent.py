import threading

import pytest

from kindtool import errors
from kindtool.concurrent import aggregate_concurrent, until_error_concurrent


def test_until_error_concurrent_first_to_return_error():
    expected = errors.new("first")
    release = threading.Event()

    def slow():
        release.wait(5)
        raise errors.new("second")

    def fast():
        raise expected

    try:
        with pytest.raises(Exception) as info:
            until_error_concurrent([slow, fast])
    finally:
        release.set()
    assert info.value is expected


def test_until_error_concurrent_nil():
    calls = []
    result = until_error_concurrent([lambda: calls.append("ran")])
    assert result is None
    assert calls == ["ran"]


def test_until_error_concurrent_empty():
    assert until_error_concurrent([]) is None


def test_aggregate_concurrent_all_errors_returned():
    first = errors.new("first")
    second = errors.new("second")

    def raise_second():
        raise second

    def raise_first():
        raise first

    with pytest.raises(Exception) as info:
        aggregate_concurrent([raise_second, raise_first])
    result_errors = sorted(errors.errors_of(info.value), key=str)
    assert result_errors == [first, second]


def test_aggregate_concurrent_one_error():
    expected = errors.new("foo")

    def fail():
        raise expected

    with pytest.raises(Exception) as info:
        aggregate_concurrent([fail])
    assert info.value is expected


def test_aggregate_concurrent_nil():
    calls = []
    result = aggregate_concurrent([lambda: calls.append(1), lambda: calls.append(2)])
    assert result is None
    assert sorted(calls) == [1, 2]


def test_aggregate_concurrent_waits_for_all():
    finished = []
    expected = errors.new("foo")

    def fail():
        raise expected

    def work():
        finished.append("done")

    with pytest.raises(Exception) as info:
        aggregate_concurrent([fail, work, work])
    assert info.value is expected
    assert finished == ["done", "done"]