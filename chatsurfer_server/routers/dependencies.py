"""
Shared request dependencies
"""
from typing import Optional

from fastapi import Header, Request
import structlog

from chatsurfer_server.services.config import Settings
from chatsurfer_server.services.fixtures import FixtureGenerator

logger = structlog.get_logger()


def get_settings(req: Request) -> Settings:
    return req.app.state.settings


def get_generator(req: Request) -> FixtureGenerator:
    return req.app.state.fixture_generator


def record_api_key(api_key: Optional[str]) -> Optional[str]:
    """Record the caller's api-key header; it is never checked"""
    if api_key is not None:
        logger.info("api-key header received", api_key=api_key)
    return api_key


async def log_api_key(api_key: Optional[str] = Header(default=None, alias="api-key")) -> Optional[str]:
    return record_api_key(api_key)
