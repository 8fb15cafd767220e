"""
Image Operations
================

This package holds the operation-chain pipeline: the parameter grammar, the frozen
registry of named transforms and the executor that applies a chain in order.

Quick Start:
    from operations import apply_chain, get_operation_registry

    result = apply_chain(image, "fill=200x200@center,grayscale")
    registry = get_operation_registry()
    registry["blur"].shape  # ParamShape.FLOAT
"""

from operations.chain import Step, apply_chain, compile_chain, parse_chain, run_steps
from operations.registry import (
    OperationAlreadyRegisteredError,
    OperationRegistry,
    RegisteredOperation,
    RegistryFrozenError,
    get_operation_registry,
)
from operations.types import Anchor, CropSpec, Dimensions, Operation, ParamShape

__all__ = [
    "apply_chain",
    "compile_chain",
    "parse_chain",
    "run_steps",
    "Step",
    "get_operation_registry",
    "OperationRegistry",
    "RegisteredOperation",
    # Types
    "Anchor",
    "CropSpec",
    "Dimensions",
    "Operation",
    "ParamShape",
    # Exceptions
    "OperationAlreadyRegisteredError",
    "RegistryFrozenError",
]
