from pydantic import BaseModel


class ErrorDescriptor(BaseModel):
    status: int
    error: str  # HTTP reason phrase, e.g. "Conflict"
    code: str  # Error type, e.g. "SlugConflict"


class FlashResponse(BaseModel):
    """Shape shared by every API response."""
    error: ErrorDescriptor | None = None
    flash: str | None = None
