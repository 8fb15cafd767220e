from typing import Self

from pydantic import BaseModel, ConfigDict, Field

from operations import ParamShape, RegisteredOperation


class OperationInfo(BaseModel):
    """Public description of a registered operation."""

    model_config = ConfigDict(frozen=True, extra="forbid")

    name: str = Field(..., description="Name used in the operation chain.", examples=["blur"])
    shape: ParamShape = Field(..., description="Shape of the parameter after '='.")
    description: str = Field(..., description="What the operation does.")
    example: str = Field(..., description="A valid chain token.", examples=["blur=1.5"])

    @classmethod
    def from_registered(cls, operation: RegisteredOperation) -> Self:
        return cls(
            name=operation.name,
            shape=operation.shape,
            description=operation.description,
            example=operation.example,
        )
