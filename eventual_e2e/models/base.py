"""Base model configuration for option and configuration structures."""

from pydantic import BaseModel, ConfigDict


class Model(BaseModel):
    """Base model with standard configuration.

    Instances are immutable and shared by every scenario in a test process.
    """

    model_config = ConfigDict(frozen=True, extra="forbid")
