from pydantic import BaseModel, Field

from phone_verification.domain.services import MAX_CODE_LENGTH


class PhoneVerificationRequestIn(BaseModel):
    phone_number: str = Field(
        ..., description="Phone number in E.164 format", min_length=1, max_length=32
    )


class PhoneVerificationConfirmIn(BaseModel):
    phone_number: str = Field(
        ..., description="Phone number in E.164 format", min_length=1, max_length=32
    )
    code: str = Field(
        ..., description="The code received by SMS", min_length=1, max_length=MAX_CODE_LENGTH
    )
