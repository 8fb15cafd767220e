"""
Railway-oriented programming pipeline utilities.

This module hides the container mechanics of the ``returns`` library behind a single
entry point, :func:`run_pipeline`. Each task either keeps the value on the success
track or switches to the failure track; the first failure skips every remaining task.

Unlike a plain ``unwrap``, :func:`run_pipeline` re-raises the domain error carried by
the failure track, so callers (and ultimately the HTTP layer) can tell a missing
source from a malformed chain or a failed transform.
"""

from collections.abc import Callable
from typing import Any

from returns.interfaces.container import ContainerN
from returns.io import IOFailure, IOResultE, IOSuccess
from returns.pipeline import flow
from returns.pointfree import bind
from returns.result import Failure, ResultE, Success

from exceptions import ImageServerError


def _capture_result_value[T](result: IOResultE[T] | ResultE[T], error_message: str) -> T:
    match result:
        case IOSuccess(Success(value)) | Success(value):
            return value
        case IOFailure(Failure(error)) | Failure(error) if isinstance(error, ImageServerError):
            raise error
        case IOFailure(Failure(error)) | Failure(error):
            raise ImageServerError(f"{error_message}: {error}") from error
        case _:
            raise ImageServerError(error_message)


def _pipeline_flow[T](entry_value: Any | ContainerN, *pipeline: Callable[..., Any]) -> IOResultE[T] | ResultE[T]:
    first_function = None
    pipeline_tasks: Any = pipeline
    if not isinstance(entry_value, ContainerN):
        first_function, *pipeline_tasks = pipeline

    return flow(
        entry_value,
        *((first_function,) if first_function else ()),
        *[bind(task) for task in pipeline_tasks],
    )


def run_pipeline(entry_value: Any | ContainerN, *tasks: Callable[[Any], Any], error_message: str) -> Any:
    """
    Execute a series of tasks in a functional pipeline and return the final result.

    :param entry_value: The initial value to pass into the pipeline. This may be a raw
        value or a container from the ``returns`` library (e.g. ``ResultE``).
    :param tasks: Callables executed sequentially. Each accepts the output of the
        previous task and returns a container.
    :param error_message: Message used when the failure track holds something other
        than an :class:`~exceptions.ImageServerError`.
    :returns: The unwrapped success value of the final pipeline result.
    :raises ImageServerError: The error that stopped the pipeline.

    :examples
    --------
    >>> image = run_pipeline(
    ...     source_path,
    ...     open_image,
    ...     partial(apply_chain, chain="fill=200x200@center,grayscale"),
    ...     error_message="Image processing failed",
    ... )
    """
    return _capture_result_value(
        _pipeline_flow(entry_value, *tasks),
        error_message,
    )
