"""Tests for wire models."""

import pytest
from pydantic import TypeAdapter, ValidationError

from chatsurfer_server.models.chat import (
    ErrorCode400,
    FieldError,
    Location,
    PointLocation,
    PolygonLocation,
    SearchChatMessagesRequest,
    SendChatMessageRequest,
    SortDirection,
    SortField,
)

location_adapter = TypeAdapter(Location)


def test_location_point():
    """The type tag selects the Point variant."""
    location = location_adapter.validate_python({"type": "Point", "coordinates": [10.5, -20.0]})
    assert isinstance(location, PointLocation)
    assert location.coordinates == (10.5, -20.0)


def test_location_polygon():
    """The type tag selects the Polygon variant."""
    ring = [[0, 0], [1, 0], [1, 1], [0, 1]]
    location = location_adapter.validate_python({"type": "Polygon", "coordinates": ring})
    assert isinstance(location, PolygonLocation)
    assert len(location.coordinates) == 4


@pytest.mark.parametrize("payload", [
    {"type": "Point", "coordinates": [[0, 0], [1, 1], [2, 2]]},
    {"type": "Polygon", "coordinates": [1.0, 2.0]},
    {"type": "Polygon", "coordinates": [[0, 0], [1, 1]]},
    {"type": "Circle", "coordinates": [0, 0]},
    {"coordinates": [0, 0]},
])
def test_location_mismatched_payload_rejected(payload):
    """Coordinates must match the declared variant."""
    with pytest.raises(ValidationError):
        location_adapter.validate_python(payload)


def test_search_request_parses_filters():
    """Filter fields parse by wire name."""
    request = SearchChatMessagesRequest.model_validate({
        "keywordFilter": {"query": "foo bar"},
        "sort": {"orders": [{"direction": "ASC", "field": "ROOM"}]},
        "threadIdFilter": {"threadIds": ["t1"]},
        "userIdFilter": {"userIds": ["u1"]},
        "filesOnly": True,
        "UserHighClassification": "Test",
        "somethingUnknown": 1,
    })
    assert request.query == "foo bar"
    assert request.sort.orders[0].direction is SortDirection.ASC
    assert request.sort.orders[0].field is SortField.ROOM
    assert request.thread_id_filter.thread_ids == ["t1"]
    assert request.user_high_classification == "Test"


def test_search_request_empty():
    """Every search field is optional."""
    request = SearchChatMessagesRequest.model_validate({})
    assert request.query is None


def test_send_request_default_nickname():
    request = SendChatMessageRequest.model_validate({
        "classification": "UNCLASSIFIED",
        "domainId": "d",
        "message": "m",
        "roomName": "r",
    })
    assert request.nickname == "Edge View"


def test_error_body_wire_names():
    """400 bodies serialize with camelCase names."""
    body = ErrorCode400(
        classification="UNCLASSIFIED",
        field_errors=[FieldError(field_name="a", message="b", message_code="c", rejected_value="d")],
        message="Bad Request",
    ).model_dump(by_alias=True)
    assert body["code"] == 400
    assert body["fieldErrors"][0] == {
        "fieldName": "a",
        "message": "b",
        "messageArguments": [],
        "messageCode": "c",
        "rejectedValue": "d",
    }
