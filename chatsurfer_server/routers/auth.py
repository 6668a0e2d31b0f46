"""
Static authentication records: API key lookup and realm public key
"""
import json

from fastapi import APIRouter, Depends, Response
import structlog

from chatsurfer_server.models.chat import ApiKeyStatus, GetApiResponse
from chatsurfer_server.routers.dependencies import get_settings, log_api_key
from chatsurfer_server.services.config import Settings

logger = structlog.get_logger()

router = APIRouter(tags=["auth"], dependencies=[Depends(log_api_key)])

TEST_DN = "CN=Test User,OU=Testing,O=Edge View,C=US"
TEST_EMAIL = "test.user@example.com"
TEST_API_KEY = "00000000-0000-4000-8000-000000000000"

# Shape of a Keycloak realm descriptor. The key is not a usable credential.
REALM_PUBLIC_KEY = json.dumps({
    "realm": "fmv",
    "public_key": (
        "MIIBIjANBgkqhkiG9w0BAQEFAAOCAQ8AMIIBCgKCAQEAtestkeytestkeytestkeytestkey"
        "testkeytestkeytestkeytestkeytestkeytestkeytestkeytestkeytestkeyIDAQAB"
    ),
    "token-service": "http://localhost/auth/realms/fmv/protocol/openid-connect",
    "account-service": "http://localhost/auth/realms/fmv/account",
    "tokens-not-before": 0,
})


@router.get("/api/auth/key", response_model=GetApiResponse)
async def get_api_key(settings: Settings = Depends(get_settings)) -> GetApiResponse:
    logger.debug("API key request received")
    return GetApiResponse(
        classification=settings.CLASSIFICATION,
        dn=TEST_DN,
        email=TEST_EMAIL,
        key=TEST_API_KEY,
        status=ApiKeyStatus.ACTIVE,
    )


@router.get("/auth/realms/fmv")
async def get_realm_public_key() -> Response:
    """Return the realm descriptor verbatim"""
    logger.debug("Public key request received")
    return Response(content=REALM_PUBLIC_KEY, media_type="application/json")
