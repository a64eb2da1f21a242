"""Login API Router - exchanges Kraken credentials for a sealed token."""
from fastapi import APIRouter, Depends
from pydantic import BaseModel, Field, StrictStr

from kraken_proxy.dependencies import get_token_service
from kraken_proxy.domain.credentials.tokens import CredentialPair, CredentialTokenService

router = APIRouter()


class LoginRequest(BaseModel):
    api_key: StrictStr = Field(..., alias="apiKey", min_length=1)
    api_secret: StrictStr = Field(..., alias="apiSecret", min_length=1)


class LoginResponse(BaseModel):
    token: str


@router.post("/login", response_model=LoginResponse)
async def login(
    request: LoginRequest,
    tokens: CredentialTokenService = Depends(get_token_service)
) -> LoginResponse:
    """Seal the API key and secret into a stateless bearer token."""
    pair = CredentialPair(api_key=request.api_key, api_secret=request.api_secret)
    return LoginResponse(token=tokens.issue(pair))
