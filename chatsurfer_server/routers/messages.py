"""
Chat message endpoints: list, search and send
"""
from fastapi import APIRouter, Depends, Response, status
import structlog

from chatsurfer_server.models.chat import (
    GetChatMessagesResponse,
    SearchChatMessagesRequest,
    SearchChatMessagesResponse,
    SendChatMessageRequest,
)
from chatsurfer_server.routers.dependencies import get_generator, get_settings, log_api_key
from chatsurfer_server.services.config import Settings
from chatsurfer_server.services.fixtures import FixtureGenerator
from chatsurfer_server.services.search import InvalidSearchQuery, search_messages
from chatsurfer_server.utils.metrics import sent_messages, track_messages_served, track_search

logger = structlog.get_logger()

router = APIRouter(tags=["messages"], dependencies=[Depends(log_api_key)])


@router.get("/api/chat/messages/{domain}/{room}", response_model=GetChatMessagesResponse)
async def get_chat_messages(
    domain: str,
    room: str,
    generator: FixtureGenerator = Depends(get_generator),
    settings: Settings = Depends(get_settings),
) -> GetChatMessagesResponse:
    """Return the full canned message set for any domain and room"""
    logger.debug("Get messages request received", domain=domain, room=room)
    messages = generator.build_fixture_set()
    track_messages_served(len(messages), route="get")
    return GetChatMessagesResponse(
        classification=settings.CLASSIFICATION,
        messages=messages,
        domain_id=domain,
        private=False,
        room_name=room,
    )


@router.post("/api/chat/messages/search", response_model=SearchChatMessagesResponse)
@router.post("/api/chatsearch/messages/search", response_model=SearchChatMessagesResponse)
async def search_chat_messages(
    request: SearchChatMessagesRequest,
    generator: FixtureGenerator = Depends(get_generator),
    settings: Settings = Depends(get_settings),
) -> SearchChatMessagesResponse:
    """
    Substring search on the first token of keywordFilter.query

    An empty or whitespace-only query raises InvalidSearchQuery, which the
    application turns into a 400.
    """
    logger.debug(
        "Search request received",
        query=request.query,
        user_high_classification=request.user_high_classification,
    )
    try:
        response = search_messages(generator, request, settings.CLASSIFICATION)
    except InvalidSearchQuery:
        track_search("rejected")
        raise
    track_search("ok")
    track_messages_served(response.total, route="search")
    return response


@router.post("/api/chatserver/message", status_code=status.HTTP_204_NO_CONTENT, response_class=Response)
async def send_chat_message(request: SendChatMessageRequest) -> Response:
    """Accept a new message, log it and drop it"""
    logger.info(
        "Received new message request",
        classification=request.classification,
        domain_id=request.domain_id,
        room_name=request.room_name,
        nickname=request.nickname,
        message=request.message,
    )
    sent_messages.inc()
    return Response(status_code=status.HTTP_204_NO_CONTENT)
