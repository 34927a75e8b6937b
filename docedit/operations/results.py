"""Result models shared by every operation."""

from pydantic import BaseModel, ConfigDict, Field


class OperationResult(BaseModel):
    """Base result: every operation reports at least a human-readable summary."""

    model_config = ConfigDict(extra="forbid")

    message: str = Field(description="Human-readable summary of what the operation did")

