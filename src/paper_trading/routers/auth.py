"""Registration and login routes."""
from fastapi import APIRouter

from paper_trading.deps import AuthServiceDep
from paper_trading.schemas import Credentials, MessageResponse, TokenResponse

router = APIRouter(prefix="/auth", tags=["auth"])


@router.post("/register", response_model=MessageResponse)
async def register(body: Credentials, auth: AuthServiceDep) -> MessageResponse:
    """Create an account with a fresh portfolio (starting cash, no positions)."""
    await auth.register(body.email, body.password)
    return MessageResponse(message="Registered successfully")


@router.post("/login", response_model=TokenResponse)
async def login(body: Credentials, auth: AuthServiceDep) -> TokenResponse:
    """Exchange credentials for a bearer token."""
    return TokenResponse(token=await auth.login(body.email, body.password))
