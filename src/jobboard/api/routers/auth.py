"""API router demonstrating bearer token protection."""

from fastapi import APIRouter

from src.jobboard.api.auth import CurrentUser, TokenClaims
from src.jobboard.domain.base import CamelModel
from src.jobboard.domain.envelope import SuccessEnvelope, success_response

router = APIRouter(prefix="/auth", tags=["auth"])


class ProtectedData(CamelModel):
    """Payload of the protected endpoint."""

    user: TokenClaims


@router.get("/protected", response_model=SuccessEnvelope[ProtectedData])
async def protected(user: CurrentUser) -> SuccessEnvelope:
    """Return the verified token claims. 401 without a token, 403 with a bad one."""
    return success_response(
        ProtectedData(user=user), message="Access granted - Protected data"
    )
