import contextvars

import pytest

from algebra.errors import GcdTimeout
from polygcd import timebox
from polygcd.timebox import BudgetStatus, TimeBox, check_or_fail, time_budget, with_time_budget


def test_no_box_outside_a_budget():
    assert timebox.current() is None
    assert timebox.expired() is False
    check_or_fail("outside")


def test_with_time_budget_returns_thunk_value():
    assert with_time_budget(None, lambda: 42) == 42
    assert with_time_budget(5.0, lambda: "ok") == "ok"


def test_converged_status_and_steps():
    with time_budget(10.0, "work") as box:
        assert box.status is BudgetStatus.RUNNING
        check_or_fail("a")
        check_or_fail("b")
    assert box.status is BudgetStatus.CONVERGED
    assert box.steps == 2
    assert timebox.current() is None


def test_zero_budget_times_out_on_first_check():
    with pytest.raises(GcdTimeout) as ei:
        with time_budget(0.0, "tiny") as box:
            assert timebox.expired()
            check_or_fail("first")
    assert box.status is BudgetStatus.TIMED_OUT
    assert ei.value.description.startswith("tiny")
    assert ei.value.elapsed_s >= 0.0
    assert ei.value.limit_s == 0.0
    assert "timed out" in str(ei.value)
    assert isinstance(ei.value, TimeoutError)


def test_other_errors_mark_failed():
    with pytest.raises(KeyError):
        with time_budget(10.0) as box:
            raise KeyError("boom")
    assert box.status is BudgetStatus.FAILED


def test_nested_budget_never_extends_enclosing_deadline():
    with time_budget(0.0, "outer") as outer:
        with time_budget(60.0, "inner") as inner:
            assert inner.deadline_us == outer.deadline_us
            assert timebox.expired()
        assert timebox.current() is outer


def test_nested_budget_can_shorten_deadline():
    with time_budget(60.0, "outer") as outer:
        with time_budget(0.0, "inner"):
            assert timebox.expired()
        assert timebox.current() is outer
        assert not timebox.expired()


def test_unlimited_box_never_expires():
    with time_budget(None) as box:
        for i in range(100):
            check_or_fail(f"step {i}")
    assert box.deadline_us is None
    assert box.steps == 100


def test_budget_is_invisible_to_other_contexts():
    with time_budget(0.0):
        assert timebox.expired()
        assert contextvars.Context().run(timebox.expired) is False


def test_rejects_negative_or_nan_duration():
    with pytest.raises(ValueError):
        with time_budget(-1.0):
            pass
    with pytest.raises(ValueError):
        with time_budget(float("nan")):
            pass


def test_time_box_starts_once():
    box = TimeBox(duration_s=1.0)
    box.start()
    with pytest.raises(RuntimeError):
        box.start()
