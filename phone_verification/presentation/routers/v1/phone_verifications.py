from typing import Annotated

from fastapi import APIRouter, Depends, status
from fastapi.responses import JSONResponse

from phone_verification.application.verification_service import VerificationService
from phone_verification.domain.errors import ErrorKind, VerificationError
from phone_verification.domain.services import normalize_phone_number
from phone_verification.presentation.dependencies import get_verification_service
from phone_verification.schemas.requests import (
    PhoneVerificationConfirmIn,
    PhoneVerificationRequestIn,
)
from phone_verification.schemas.responses import CodeSentOut, ErrorOut, VerifiedOut

router = APIRouter(prefix="/phone-verifications", tags=["Phone verification"])

ERROR_STATUS: dict[ErrorKind, int] = {
    ErrorKind.INVALID_PHONE_NUMBER: status.HTTP_400_BAD_REQUEST,
    ErrorKind.CODE_MISMATCH: status.HTTP_400_BAD_REQUEST,
    ErrorKind.NO_PENDING_VERIFICATION: status.HTTP_404_NOT_FOUND,
    ErrorKind.CODE_EXPIRED: status.HTTP_410_GONE,
    ErrorKind.DELIVERY_FAILED: status.HTTP_502_BAD_GATEWAY,
    ErrorKind.ENTROPY_UNAVAILABLE: status.HTTP_503_SERVICE_UNAVAILABLE,
}

_error_responses = {
    code: {"model": ErrorOut} for code in sorted(set(ERROR_STATUS.values()))
}


def error_response(exc: VerificationError) -> JSONResponse:
    return JSONResponse(
        status_code=ERROR_STATUS.get(exc.kind, status.HTTP_400_BAD_REQUEST),
        content={"detail": str(exc), "error": exc.kind.value},
    )


@router.post(
    "",
    status_code=status.HTTP_202_ACCEPTED,
    response_model=CodeSentOut,
    response_model_exclude_none=True,
    responses=_error_responses,
)
async def post_request_code(
    body: PhoneVerificationRequestIn,
    service: Annotated[VerificationService, Depends(get_verification_service)],
):
    try:
        result = await service.request_code(body.phone_number)
    except VerificationError as e:
        return error_response(e)
    return CodeSentOut(
        phone_number=result.phone_number,
        expires_at=result.expires_at,
        code=result.code,
    )


@router.post("/confirm", response_model=VerifiedOut, responses=_error_responses)
async def post_confirm_code(
    body: PhoneVerificationConfirmIn,
    service: Annotated[VerificationService, Depends(get_verification_service)],
):
    try:
        await service.confirm(body.phone_number, body.code)
    except VerificationError as e:
        return error_response(e)
    return VerifiedOut(phone_number=normalize_phone_number(body.phone_number))
