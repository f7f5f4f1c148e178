from datetime import datetime
from typing import Literal

from pydantic import BaseModel, Field


class CodeSentOut(BaseModel):
    status: Literal["sent"] = "sent"
    phone_number: str = Field(..., description="Normalized phone number")
    expires_at: datetime
    code: str | None = Field(
        default=None, description="Issued code; only present in diagnostics mode"
    )


class VerifiedOut(BaseModel):
    status: Literal["verified"] = "verified"
    phone_number: str


class ErrorOut(BaseModel):
    detail: str
    error: str
