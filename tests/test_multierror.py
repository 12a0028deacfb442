import threading

import pytest

from aurkit.multierror import MultiError


def test_add_ignores_none():
    errs = MultiError()
    errs.add(None)
    errs.raise_if_errors()
    assert errs.errors == []


def test_raise_if_errors_raises_self_with_joined_message():
    errs = MultiError()
    first = ValueError("first")
    second = RuntimeError("second")
    errs.add(first)
    errs.add(second)
    with pytest.raises(MultiError) as info:
        errs.raise_if_errors()
    assert info.value is errs
    assert info.value.errors == [first, second]
    assert str(info.value) == "first\nsecond"


def test_single_error_message_has_no_trailing_newline():
    errs = MultiError()
    errs.add(OSError("boom"))
    assert str(errs) == "boom"


def test_concurrent_adds_are_all_kept():
    errs = MultiError()

    def worker(n):
        errs.add(ValueError(str(n)))

    threads = [threading.Thread(target=worker, args=(n,)) for n in range(40)]
    for thread in threads:
        thread.start()
    for thread in threads:
        thread.join()

    assert sorted(int(str(e)) for e in errs.errors) == list(range(40))