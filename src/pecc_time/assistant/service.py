"""Wrappers around the unreliable external collaborators.

Geocoding and the admin assistant are slow, remote and allowed to fail. These
wrappers make sure a failure only costs the user a nicer description or an
answer, never a clock-in or a record.
"""

from __future__ import annotations

import json
import logging
from typing import Iterable, Optional, Protocol
from urllib.parse import urlencode

from ..core.constants import ASSISTANT_UNAVAILABLE, LOCATION_UNAVAILABLE
from ..storage.mapping import SUBMISSION_CODEC, TIME_ENTRY_CODEC
from ..submissions.model import ContractorSubmission
from ..time_entries.model import LocationInfo, TimeEntry

logger = logging.getLogger(__name__)


class Geocoder(Protocol):
    def describe(self, latitude: float, longitude: float) -> tuple[str, Optional[str]]:
        """Return (place description, optional map link) for the coordinates."""
        raise NotImplementedError


class QueryResponder(Protocol):
    def respond(self, question: str, context: str) -> str:
        raise NotImplementedError


def map_link(latitude: float, longitude: float) -> str:
    return "https://www.google.com/maps/search/?" + urlencode({"api": 1, "query": f"{latitude},{longitude}"})


class LocationResolver:
    """Use case: turn raw coordinates into a LocationInfo, whatever the geocoder does."""

    def __init__(self, geocoder: Optional[Geocoder] = None):
        self._geocoder = geocoder

    def resolve(self, latitude: float, longitude: float) -> LocationInfo:
        latitude = float(latitude)
        longitude = float(longitude)
        if self._geocoder is None:
            return LocationInfo(latitude=latitude, longitude=longitude, description=f"{latitude:.5f}, {longitude:.5f}")

        try:
            description, map_uri = self._geocoder.describe(latitude, longitude)
        except Exception as e:
            logger.warning("Geocoding failed for %s,%s: %s", latitude, longitude, e)
            return LocationInfo(latitude=latitude, longitude=longitude, description=LOCATION_UNAVAILABLE)

        return LocationInfo(
            latitude=latitude,
            longitude=longitude,
            description=description or LOCATION_UNAVAILABLE,
            map_uri=map_uri,
        )


def build_context(time_entries: Iterable[TimeEntry], submissions: Iterable[ContractorSubmission]) -> str:
    """JSON snapshot of the data the assistant is allowed to answer from."""
    return json.dumps(
        {
            "timeEntries": [TIME_ENTRY_CODEC.to_cache(e) for e in time_entries],
            "contractorSubmissions": [SUBMISSION_CODEC.to_cache(s) for s in submissions],
        },
        ensure_ascii=False,
    )


class AssistantService:
    """Use case: answer an admin's question about the tracked data."""

    def __init__(self, responder: QueryResponder):
        self._responder = responder

    def ask(
        self,
        question: str,
        *,
        time_entries: Iterable[TimeEntry],
        submissions: Iterable[ContractorSubmission],
    ) -> str:
        question = (question or "").strip()
        if not question:
            return ""
        try:
            return self._responder.respond(question, build_context(time_entries, submissions))
        except Exception as e:
            logger.error("Assistant failed to answer: %s", e)
            return ASSISTANT_UNAVAILABLE
