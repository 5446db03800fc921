"""Tests for the signal-driven stop flag."""

import signal

import pytest

from resizer.stop_flag import StopFlag


@pytest.fixture
def stop_flag():
    flag = StopFlag()
    flag.register_signal_handlers()
    yield flag
    flag.restore_signal_handlers()


def test_first_interrupt_requests_stop(stop_flag):
    signal.raise_signal(signal.SIGINT)

    assert stop_flag.is_stop_requested()


def test_terminate_requests_stop(stop_flag):
    signal.raise_signal(signal.SIGTERM)

    assert stop_flag.is_stop_requested()


def test_second_interrupt_aborts(stop_flag):
    signal.raise_signal(signal.SIGINT)

    with pytest.raises(KeyboardInterrupt):
        signal.raise_signal(signal.SIGINT)


def test_restore_puts_back_previous_handlers():
    before = signal.getsignal(signal.SIGINT)
    flag = StopFlag()

    flag.register_signal_handlers()
    assert signal.getsignal(signal.SIGINT) != before
    flag.restore_signal_handlers()

    assert signal.getsignal(signal.SIGINT) == before
