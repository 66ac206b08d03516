from __future__ import annotations

import logging
from typing import Any, Dict, List

import httpx

from ..errors import CollaboratorError
from .loader import parse_schedule_response

logger = logging.getLogger(__name__)


def _error_message(response: httpx.Response, fallback: str) -> str:
    try:
        payload = response.json()
    except ValueError:
        return f"{fallback} (HTTP {response.status_code})"
    if isinstance(payload, dict):
        return str(payload.get("error") or payload.get("message") or fallback)
    return fallback


class AggregationClient:
    """Fetches the raw domain data of one timetable (courses, rooms, sections...)."""

    def __init__(self, base_url: str, *, timeout: float = 30.0, client: httpx.Client | None = None):
        self.base_url = base_url.rstrip("/")
        self.timeout = timeout
        self.client = client

    def fetch(self, timetable_id: str) -> Dict[str, Any]:
        url = f"{self.base_url}/api/data/{timetable_id}"
        try:
            if self.client is not None:
                r = self.client.get(url, timeout=self.timeout)
            else:
                with httpx.Client(follow_redirects=True) as c:
                    r = c.get(url, timeout=self.timeout)
        except httpx.HTTPError as e:
            logger.error(f"Aggregation request failed: {e}")
            raise CollaboratorError(f"Could not reach data service: {e}") from e
        if r.status_code >= 400:
            raise CollaboratorError(_error_message(r, "Failed to load timetable data"))
        try:
            payload = r.json()
        except ValueError as e:
            raise CollaboratorError("Invalid data response") from e
        if not isinstance(payload, dict) or not payload:
            raise CollaboratorError("Invalid data response")
        return payload


class SchedulerClient:
    """Posts aggregation data to the scheduling service, unmodified."""

    def __init__(self, url: str, *, timeout: float = 120.0, client: httpx.Client | None = None):
        self.url = url
        self.timeout = timeout
        self.client = client

    def schedule(self, payload: Dict[str, Any]) -> List[Dict[str, Any]]:
        try:
            if self.client is not None:
                r = self.client.post(self.url, json=payload, timeout=self.timeout)
            else:
                with httpx.Client(follow_redirects=True) as c:
                    r = c.post(self.url, json=payload, timeout=self.timeout)
        except httpx.HTTPError as e:
            logger.error(f"Scheduling request failed: {e}")
            raise CollaboratorError(f"Could not reach scheduling service: {e}") from e
        try:
            body = r.json()
        except ValueError as e:
            raise CollaboratorError(
                f"Failed to generate schedule (HTTP {r.status_code})"
            ) from e
        # The scheduler answers 400 with {success: false, error} when no solution exists.
        sections = parse_schedule_response(body)
        logger.info(f"Scheduler returned {len(sections)} sections")
        return sections
