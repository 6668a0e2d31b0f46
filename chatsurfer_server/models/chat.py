"""
Data models for the emulated ChatSurfer chat API

Field aliases carry the camelCase wire names; responses are serialized by alias.
"""
from enum import Enum
from typing import Annotated, Dict, List, Literal, Optional, Tuple, Union

from pydantic import BaseModel, ConfigDict, Field

Coordinate = Tuple[float, float]  # (longitude, latitude)


class WireModel(BaseModel):
    """Base for request models: accepts either wire or attribute names"""
    model_config = ConfigDict(populate_by_name=True, extra="ignore")


class FrozenWireModel(BaseModel):
    """Base for generated records, immutable once built"""
    model_config = ConfigDict(populate_by_name=True, frozen=True)


class PointLocation(FrozenWireModel):
    """A single coordinate pair"""
    type: Literal["Point"] = "Point"
    coordinates: Coordinate


class PolygonLocation(FrozenWireModel):
    """An ordered ring of coordinate pairs; the last vertex joins the first"""
    type: Literal["Polygon"] = "Polygon"
    coordinates: List[Coordinate] = Field(..., min_length=3)


Location = Annotated[Union[PointLocation, PolygonLocation], Field(discriminator="type")]


class Region(FrozenWireModel):
    abbreviation: str
    bounds: List[float]
    description: str
    name: str
    region_type: str = Field(..., alias="regionType")


class GeoTag(FrozenWireModel):
    """Geographic annotation attached to a span of message text"""
    anchor_start: int = Field(..., alias="anchorStart", ge=0)
    anchor_end: int = Field(..., alias="anchorEnd", ge=0)
    anchor_text: str = Field(..., alias="anchorText")
    confidence: float
    location: Location
    regions: List[Region] = Field(default_factory=list)
    type: str = "PAL"


class ChatMessage(FrozenWireModel):
    classification: str
    domain_id: str = Field(..., alias="domainId")
    geo_tags: Optional[List[GeoTag]] = Field(default=None, alias="geoTags")
    id: str
    room_name: str = Field(..., alias="roomName")
    sender: str
    text: str
    thread_id: Optional[str] = Field(default=None, alias="threadId")
    timestamp: str
    user_id: str = Field(..., alias="userId")
    private: bool = False


class GetChatMessagesResponse(WireModel):
    classification: str
    messages: List[ChatMessage]
    domain_id: str = Field(..., alias="domainId")
    private: bool = False
    room_name: str = Field(..., alias="roomName")


# Search request filters. These are validated for shape and otherwise ignored.

class KeywordFilter(WireModel):
    query: Optional[str] = None


class MentionType(str, Enum):
    USER = "USER"


class Mention(WireModel):
    mention_type: MentionType = Field(..., alias="mentionType")
    value: str


class MentionFilter(WireModel):
    mentions: List[Mention] = Field(default_factory=list)


class DomainFilterProperties(WireModel):
    properties: List[str] = Field(default_factory=list)


class DomainFilterDetail(WireModel):
    domains: Dict[str, DomainFilterProperties] = Field(default_factory=dict)


class SortDirection(str, Enum):
    ASC = "ASC"
    DESC = "DESC"


class SortField(str, Enum):
    DOMAIN = "DOMAIN"
    RELEVANCE = "RELEVANCE"
    ROOM = "ROOM"
    SENDER = "SENDER"
    TIME = "TIME"


class SortOrder(WireModel):
    direction: SortDirection = SortDirection.DESC
    field: SortField = SortField.TIME


class SortFilter(WireModel):
    orders: List[SortOrder] = Field(default_factory=list)


class ThreadIdFilter(WireModel):
    thread_ids: List[str] = Field(default_factory=list, alias="threadIds")


class TimeFilterRequest(WireModel):
    start_date_time: Optional[str] = Field(default=None, alias="startDateTime")
    end_date_time: Optional[str] = Field(default=None, alias="endDateTime")
    look_back_duration: Optional[str] = Field(default=None, alias="lookBackDuration")


class UserIdFilter(WireModel):
    user_ids: List[str] = Field(default_factory=list, alias="userIds")


class SearchChatMessagesRequest(WireModel):
    cursor: Optional[str] = None
    files_only: Optional[bool] = Field(default=None, alias="filesOnly")
    highlight_results: Optional[bool] = Field(default=None, alias="highlightResults")
    keyword_filter: Optional[KeywordFilter] = Field(default=None, alias="keywordFilter")
    limit: Optional[int] = None
    location: Optional[Location] = None
    location_filter: Optional[bool] = Field(default=None, alias="locationFilter")
    mention_filter: Optional[MentionFilter] = Field(default=None, alias="mentionFilter")
    request_geo_tags: Optional[bool] = Field(default=None, alias="requestGeoTags")
    room_filter: Optional[DomainFilterDetail] = Field(default=None, alias="roomFilter")
    sender_filter: Optional[DomainFilterDetail] = Field(default=None, alias="senderFilter")
    sort: Optional[SortFilter] = None
    thread_id_filter: Optional[ThreadIdFilter] = Field(default=None, alias="threadIdFilter")
    time_filter: Optional[TimeFilterRequest] = Field(default=None, alias="timeFilter")
    user_id_filter: Optional[UserIdFilter] = Field(default=None, alias="userIdFilter")
    user_high_classification: Optional[str] = Field(default=None, alias="UserHighClassification")

    @property
    def query(self) -> Optional[str]:
        return self.keyword_filter.query if self.keyword_filter else None


class TimeFilterResponse(WireModel):
    end_date_time: str = Field(..., alias="endDateTime")


class SearchChatMessagesResponse(WireModel):
    classification: str
    messages: List[ChatMessage] = Field(default_factory=list)
    next_cursor_mark: Optional[str] = Field(default=None, alias="nextCursorMark")
    search_time_filter: TimeFilterResponse = Field(..., alias="searchTimeFilter")
    total: int


class SendChatMessageRequest(WireModel):
    classification: str
    domain_id: str = Field(..., alias="domainId")
    message: str
    nickname: str = "Edge View"
    room_name: str = Field(..., alias="roomName")


class ApiKeyStatus(str, Enum):
    ACTIVE = "ACTIVE"
    DISABLED = "DISABLED"
    PENDING = "PENDING"


class GetApiResponse(WireModel):
    classification: str
    dn: str
    email: str
    key: str
    status: ApiKeyStatus


class FieldError(WireModel):
    field_name: str = Field(..., alias="fieldName")
    message: str
    message_arguments: List[str] = Field(default_factory=list, alias="messageArguments")
    message_code: str = Field(..., alias="messageCode")
    rejected_value: Optional[str] = Field(default=None, alias="rejectedValue")


class ErrorCode400(WireModel):
    """Validation failure body returned with every 400"""
    classification: str
    code: int = 400
    field_errors: List[FieldError] = Field(default_factory=list, alias="fieldErrors")
    message: str = "Bad Request"
