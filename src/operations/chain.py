"""
Operation chain executor.

A chain such as ``fill=200x200@center,grayscale,contrast=20`` is parsed into
:class:`~operations.types.Operation` tokens, compiled against the registry into bound
:class:`Step` objects and then applied strictly left to right. The output of step *i*
is the only input of step *i + 1*; the first failing step switches the railway to the
failure track and the remaining steps are skipped.

Compilation validates the whole chain before any pixel work is done, so a malformed
parameter at the end of a chain never costs a decode or a transform.
"""

from collections.abc import Mapping
from dataclasses import dataclass
from functools import partial
from typing import Any, Final

from loguru import logger
from PIL.Image import Image
from returns.pipeline import flow
from returns.pointfree import bind
from returns.result import ResultE, Success, safe

from exceptions import InvalidOperation, ParameterError, TransformError, UnknownOperation
from operations.registry import RegisteredOperation, get_operation_registry
from operations.types import Operation
from utils.logger import FailureLevel, log_railway_function

CHAIN_SEPARATOR: Final = ","
PARAM_SEPARATOR: Final = "="


@dataclass(frozen=True)
class Step:
    """A registered operation bound to its already parsed parameter."""

    operation: RegisteredOperation
    value: Any

    @property
    def name(self) -> str:
        return self.operation.name

    def __call__(self, image: Image) -> ResultE[Image]:
        logger.debug(f"Applying {self.name}({self.value})")
        return safe(self.operation.transform)(image, self.value).alt(partial(TransformError, self.name))


def parse_chain(chain: str) -> tuple[Operation, ...]:
    """
    Split ``op1=param1,op2,op3=param3`` into operations, preserving their order.

    Each token is split on its first ``=``; a token without ``=`` has an empty
    parameter. Duplicates are kept.

    :raises InvalidOperation: If the chain contains an empty token or a token without a name.
    """
    operations = []
    for token in chain.split(CHAIN_SEPARATOR):
        name, _, raw_param = token.partition(PARAM_SEPARATOR)
        if not name:
            raise InvalidOperation(f"Empty operation in chain '{chain}'")
        operations.append(Operation(name=name, raw_param=raw_param))
    return tuple(operations)


def compile_chain(
    chain: str,
    registry: Mapping[str, RegisteredOperation] | None = None,
) -> tuple[Step, ...]:
    """
    Parse ``chain`` and bind every operation to its typed parameter.

    :param chain: The raw comma separated operation chain.
    :param registry: Name lookup table, defaults to the built-in operations.
    :return: The steps in chain order.
    :raises InvalidOperation: On an empty token.
    :raises UnknownOperation: On a name that is not registered.
    :raises ParameterError: On a parameter that does not match the operation's grammar.
    """
    registry = get_operation_registry() if registry is None else registry
    steps = []
    for operation in parse_chain(chain):
        if (registered := registry.get(operation.name)) is None:
            raise UnknownOperation(operation.name)
        try:
            value = registered.parse(operation.raw_param)
        except ParameterError as error:
            raise error.for_operation(operation.name) from error
        steps.append(Step(operation=registered, value=value))
    return tuple(steps)


def run_steps(image: Image, steps: tuple[Step, ...]) -> ResultE[Image]:
    """Apply ``steps`` in order, stopping at the first failure."""
    return flow(Success(image), *(bind(step) for step in steps))


@log_railway_function("Failed to apply operation chain", failure_level=FailureLevel.WARNING)
def apply_chain(
    image: Image,
    chain: str,
    registry: Mapping[str, RegisteredOperation] | None = None,
) -> ResultE[Image]:
    """
    Compile ``chain`` and apply it to ``image``.

    :return: ``Success`` with the transformed image, or ``Failure`` holding the
        :class:`~exceptions.ImageServerError` that stopped the chain.
    """
    return safe(compile_chain)(chain, registry).bind(partial(run_steps, image))
