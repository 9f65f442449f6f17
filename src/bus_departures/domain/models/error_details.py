"""Error details domain model."""

from pydantic import BaseModel, ConfigDict


class ErrorDetails(BaseModel):
    """Stable error body returned when the departure board cannot be built."""

    model_config = ConfigDict(frozen=True)

    error: str
    reason: str
    status_code: int
