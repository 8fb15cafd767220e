import logging
from collections.abc import Callable, Set
from typing import Final

import pytest
from returns.io import IOFailure, IOResult, IOSuccess
from returns.result import Failure, Result, Success

from utils.logger import FailureLevel, log_railway_function

SUCCESS_MESSAGE: Final = "Operation succeeded"
FAILURE_MESSAGE: Final = "Operation failed"
ERROR_VALUE: Final = RuntimeError("Something went wrong")


@log_railway_function(failure_message=FAILURE_MESSAGE, success_message=SUCCESS_MESSAGE)
def some_function(should_succeed: bool) -> Result[int, Exception]:
    return Success(42) if should_succeed else Failure(ERROR_VALUE)


@log_railway_function(failure_message=FAILURE_MESSAGE, success_message=SUCCESS_MESSAGE)
def some_io_function(should_succeed: bool) -> IOResult[int, Exception]:
    return IOSuccess(42) if should_succeed else IOFailure(ERROR_VALUE)


@log_railway_function(failure_message=FAILURE_MESSAGE, failure_level=FailureLevel.WARNING)
def some_client_error() -> Result[int, Exception]:
    return Failure(ERROR_VALUE)


@pytest.mark.parametrize(
    ("function", "should_succeed", "levels"),
    [
        pytest.param(some_function, True, {"DEBUG"}, id="Success"),
        pytest.param(some_function, False, {"DEBUG", "ERROR"}, id="Failure"),
        pytest.param(some_io_function, True, {"DEBUG"}, id="IOSuccess"),
        pytest.param(some_io_function, False, {"DEBUG", "ERROR"}, id="IOFailure"),
    ],
)
def test_outcome_is_logged_at_its_level(
    function: Callable[[bool], Result | IOResult],
    should_succeed: bool,
    levels: Set[str],
    caplog: pytest.LogCaptureFixture,
) -> None:
    with caplog.at_level(logging.DEBUG):
        function(should_succeed)

    assert {record.levelname for record in caplog.records} == levels


def test_failure_detail_is_only_logged_at_debug(caplog: pytest.LogCaptureFixture) -> None:
    with caplog.at_level(logging.DEBUG):
        some_function(False)

    [detail, summary] = caplog.records
    assert (detail.levelname, detail.getMessage()) == ("DEBUG", f"{FAILURE_MESSAGE}: {ERROR_VALUE}")
    assert (summary.levelname, summary.getMessage()) == ("ERROR", FAILURE_MESSAGE)


def test_warning_level_is_used_when_requested(caplog: pytest.LogCaptureFixture) -> None:
    with caplog.at_level(logging.WARNING):
        some_client_error()

    assert [record.levelname for record in caplog.records] == ["WARNING"]


@pytest.mark.parametrize("success_message", [None, ""])
def test_empty_success_message_is_not_logged(success_message: str | None, caplog: pytest.LogCaptureFixture) -> None:
    @log_railway_function(failure_message=FAILURE_MESSAGE, success_message=success_message)
    def succeed() -> IOResult[int, Exception]:
        return IOSuccess(100)

    with caplog.at_level(logging.DEBUG):
        succeed()

    assert not caplog.records


def test_plain_return_values_are_passed_through_unlogged(caplog: pytest.LogCaptureFixture) -> None:
    @log_railway_function(failure_message=FAILURE_MESSAGE)
    def plain() -> int:
        """Not a container."""
        return 7

    with caplog.at_level(logging.DEBUG):
        assert plain() == 7  # noqa: PLR2004

    assert not caplog.records
    assert plain.__doc__ == "Not a container."
