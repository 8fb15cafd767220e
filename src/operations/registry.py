"""Static dispatch table from operation name to transform and parameter shape."""

from __future__ import annotations

from collections.abc import Callable, Iterator, Mapping
from dataclasses import dataclass
from functools import lru_cache
from types import MappingProxyType
from typing import TYPE_CHECKING, Any, Final, overload

from operations.grammar import parse_crop_spec, parse_dimensions, parse_float, parse_none
from operations.types import ParamShape, TransformProtocol

if TYPE_CHECKING:
    from PIL.Image import Image

type WrapRegisterOperation = Callable[[TransformProtocol], RegisteredOperation]

PARSERS: Final[Mapping[ParamShape, Callable[[str], Any]]] = MappingProxyType(
    {
        ParamShape.NONE: parse_none,
        ParamShape.FLOAT: parse_float,
        ParamShape.DIMENSIONS: parse_dimensions,
        ParamShape.DIMENSIONS_ANCHOR: parse_crop_spec,
    }
)

EXAMPLES: Final[Mapping[ParamShape, str]] = MappingProxyType(
    {
        ParamShape.NONE: "",
        ParamShape.FLOAT: "1.5",
        ParamShape.DIMENSIONS: "200x0",
        ParamShape.DIMENSIONS_ANCHOR: "200x200@center",
    }
)


class OperationAlreadyRegisteredError(Exception):
    def __init__(self, name: str) -> None:
        self.name = name
        super().__init__(f"Operation '{name}' is already registered.")


class RegistryFrozenError(Exception):
    def __init__(self, name: str) -> None:
        self.name = name
        super().__init__(f"Cannot register '{name}': the operation registry is frozen.")


@dataclass(frozen=True)
class RegisteredOperation:
    """A transform bundled with its name, parameter shape and description."""

    name: str
    shape: ParamShape
    description: str
    transform: TransformProtocol

    def __post_init__(self) -> None:
        if fields := ", ".join(label for label in ("name", "description") if not getattr(self, label)):
            raise ValueError(f"Operation {fields} cannot be empty")

    def parse(self, raw_param: str) -> Any:
        """Parse ``raw_param`` according to this operation's shape."""
        return PARSERS[self.shape](raw_param)

    def __call__(self, image: Image, value: Any) -> Image:
        return self.transform(image, value)

    @property
    def example(self) -> str:
        return f"{self.name}={example}" if (example := EXAMPLES[self.shape]) else self.name


class OperationRegistry(Mapping[str, RegisteredOperation]):
    """Name-to-operation table that is filled once and then frozen.

    Lookups go through the read-only :class:`~collections.abc.Mapping` interface, so
    the chain executor never needs to know which operations exist.

    Example:
        >>> from PIL import ImageOps
        >>> from PIL.Image import Image
        >>> from operations.types import ParamShape
        >>> registry = OperationRegistry()
        >>> @registry.register(shape=ParamShape.NONE)
        ... def invert(image: Image, _: None) -> Image:
        ...     '''Invert color channels.'''
        ...     return ImageOps.invert(image)
        >>> registry = registry.freeze()
        >>> "invert" in registry
        True
    """

    def __init__(self) -> None:
        self._operations: dict[str, RegisteredOperation] = {}
        self._frozen = False

    @overload
    def register(self, function: TransformProtocol, *, shape: ParamShape) -> RegisteredOperation: ...

    @overload
    def register(
        self,
        function: None = None,
        *,
        shape: ParamShape,
        name: str | None = None,
        description: str | None = None,
    ) -> WrapRegisterOperation: ...

    def register(
        self,
        function: TransformProtocol | None = None,
        *,
        shape: ParamShape,
        name: str | None = None,
        description: str | None = None,
    ) -> RegisteredOperation | WrapRegisterOperation:
        """Register a transform under ``name`` (defaults to the function name).

        :raises OperationAlreadyRegisteredError: If the name is taken.
        :raises RegistryFrozenError: If the registry was already frozen.
        """

        def decorator(func: TransformProtocol) -> RegisteredOperation:
            operation_name = name or func.__name__.removeprefix("_")
            if self._frozen:
                raise RegistryFrozenError(operation_name)
            if operation_name in self._operations:
                raise OperationAlreadyRegisteredError(operation_name)
            registered = RegisteredOperation(
                name=operation_name,
                shape=shape,
                description=description or (func.__doc__ or "").strip().split("\n")[0],
                transform=func,
            )
            self._operations[operation_name] = registered
            return registered

        if function is not None:
            return decorator(function)
        return decorator

    def freeze(self) -> OperationRegistry:
        self._frozen = True
        return self

    @property
    def frozen(self) -> bool:
        return self._frozen

    def __getitem__(self, name: str) -> RegisteredOperation:
        return self._operations[name]

    def __iter__(self) -> Iterator[str]:
        return iter(self._operations)

    def __len__(self) -> int:
        return len(self._operations)


@lru_cache
def get_operation_registry() -> OperationRegistry:
    """Return the frozen registry holding the built-in operations."""
    from operations.transforms import registry

    return registry.freeze()
