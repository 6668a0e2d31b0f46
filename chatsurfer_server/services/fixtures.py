"""
Canned chat message generation

Every field of a built message is derived from its seed, sender and extra
text, except the three identifiers and the timestamp. Those come from the
injected id source and clock so tests can pin them.
"""
import uuid
from datetime import datetime, timezone
from typing import Callable, List, Optional, Tuple

import structlog

from chatsurfer_server.models.chat import (
    ChatMessage,
    Coordinate,
    GeoTag,
    PointLocation,
    PolygonLocation,
    Region,
)
from chatsurfer_server.services.config import Settings

logger = structlog.get_logger()

Clock = Callable[[], datetime]
IdFactory = Callable[[], str]

BASE_TEXT = "This is some test message text."
ANCHOR_WORD = "message"
GEOTAG_TYPE = "PAL"
REGION_HALF_WIDTH = 1.0  # degrees around the seed point

# (seed, sender, carries the keyword)
FIXTURE_SEEDS: List[Tuple[int, str, bool]] = [
    (25, "Austin", True),
    (4, "Tyler", False),
    (7, "Joe", True),
    (9, "Jeremy", False),
    (2, "Trevor", False),
    (4, "Justin", True),
    (97856, "Ryan", False),
    (123, "Joseph", False),
    (432, "Rita", False),
    (654, "Matt", False),
]


def utc_now() -> datetime:
    return datetime.now(timezone.utc)


def new_id() -> str:
    return str(uuid.uuid4())


def seed_point(seed: int) -> Coordinate:
    """Map a seed onto a longitude/latitude pair inside the valid ranges"""
    lon = float((seed * 7) % 360 - 180)
    lat = float((seed * 13) % 180 - 90)
    return lon, lat


def _clamp(value: float, low: float, high: float) -> float:
    return max(low, min(high, value))


def seed_bounds(seed: int) -> List[float]:
    lon, lat = seed_point(seed)
    return [
        _clamp(lon - REGION_HALF_WIDTH, -180.0, 180.0),
        _clamp(lat - REGION_HALF_WIDTH, -90.0, 90.0),
        _clamp(lon + REGION_HALF_WIDTH, -180.0, 180.0),
        _clamp(lat + REGION_HALF_WIDTH, -90.0, 90.0),
    ]


def build_location(seed: int):
    """Even seeds yield a Point, odd seeds a square Polygon around the point"""
    if seed % 2 == 0:
        return PointLocation(coordinates=seed_point(seed))
    west, south, east, north = seed_bounds(seed)
    return PolygonLocation(
        coordinates=[(west, south), (east, south), (east, north), (west, north)]
    )


def build_region(seed: int) -> Region:
    return Region(
        abbreviation="us",
        bounds=seed_bounds(seed),
        description=f"This region {seed} is for testing.",
        name=f"Test region {seed}",
        region_type="Country",
    )


def build_geotag(seed: int, text: str) -> GeoTag:
    """Tag the anchor word in ``text`` with a seed-derived location"""
    start = text.find(ANCHOR_WORD)
    if start < 0:
        start, anchor = 0, text
    else:
        anchor = ANCHOR_WORD
    return GeoTag(
        anchor_start=start,
        anchor_end=start + len(anchor),
        anchor_text=anchor,
        confidence=(seed % 100) / 100,
        location=build_location(seed),
        regions=[build_region(seed)],
        type=GEOTAG_TYPE,
    )


class FixtureGenerator:
    """Builds the canned message set served by every read route"""

    def __init__(
        self,
        settings: Optional[Settings] = None,
        clock: Clock = utc_now,
        id_factory: IdFactory = new_id,
    ):
        self.settings = settings or Settings()
        self.clock = clock
        self.id_factory = id_factory

    def now_iso(self) -> str:
        """Current clock reading as ISO-8601, UTC rendered with a trailing Z"""
        return self.clock().isoformat().replace("+00:00", "Z")

    def build_message(self, seed: int, sender: str, extra_text: str = "") -> ChatMessage:
        text = f"{BASE_TEXT} {extra_text}" if extra_text else BASE_TEXT
        return ChatMessage(
            classification=self.settings.CLASSIFICATION,
            domain_id=self.settings.DOMAIN_ID,
            geo_tags=[build_geotag(seed, text)],
            id=self.id_factory(),
            room_name=self.settings.ROOM_NAME,
            sender=sender,
            text=text,
            thread_id=self.id_factory(),
            timestamp=self.now_iso(),
            user_id=self.id_factory(),
            private=False,
        )

    def build_fixture_set(self) -> List[ChatMessage]:
        """The fixed ten-message set; three of them carry the search keyword"""
        keyword = self.settings.SEARCH_KEYWORD
        messages = [
            self.build_message(seed, sender, keyword if tagged else "")
            for seed, sender, tagged in FIXTURE_SEEDS
        ]
        logger.debug("Built fixture set", count=len(messages))
        return messages
