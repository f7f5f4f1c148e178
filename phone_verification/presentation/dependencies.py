from fastapi import Request

from phone_verification.application.verification_service import VerificationService


def get_verification_service(request: Request) -> VerificationService:
    # This is set in phone_verification.main lifespan()
    return request.app.state.verification_service
