"""
Keyword search over the canned message set
"""
from typing import List, Optional

import structlog

from chatsurfer_server.models.chat import (
    ChatMessage,
    SearchChatMessagesRequest,
    SearchChatMessagesResponse,
    TimeFilterResponse,
)
from chatsurfer_server.services.fixtures import FixtureGenerator

logger = structlog.get_logger()

QUERY_FIELD = "keywordFilter.query"


class InvalidSearchQuery(ValueError):
    """Raised when a search query has no usable token"""

    def __init__(self, query: Optional[str]):
        self.field = QUERY_FIELD
        self.rejected_value = query
        super().__init__(f"{QUERY_FIELD} must contain at least one non-whitespace token")


def first_token(query: Optional[str]) -> str:
    """Return the first whitespace-delimited token of ``query``"""
    tokens = query.split() if query else []
    if not tokens:
        raise InvalidSearchQuery(query)
    return tokens[0]


def filter_messages(messages: List[ChatMessage], query: Optional[str]) -> List[ChatMessage]:
    """Keep the messages whose text contains the query's first token"""
    token = first_token(query)
    return [message for message in messages if token in message.text]


def search_messages(
    generator: FixtureGenerator,
    request: SearchChatMessagesRequest,
    classification: str,
) -> SearchChatMessagesResponse:
    """
    Run a search against a freshly built fixture set

    Only the keyword filter is honored; every other filter, the sort and the
    cursor are accepted and ignored. Pagination is not implemented, so
    nextCursorMark is always null.
    """
    token = first_token(request.query)
    matches = filter_messages(generator.build_fixture_set(), token)
    logger.info("Search completed", token=token, total=len(matches))
    return SearchChatMessagesResponse(
        classification=classification,
        messages=matches,
        next_cursor_mark=None,
        search_time_filter=TimeFilterResponse(end_date_time=generator.now_iso()),
        total=len(matches),
    )
