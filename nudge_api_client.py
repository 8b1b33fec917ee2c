"""Nudge API client.

This module defines a small client wrapper around the events/nudges
REST API.  It covers the same operations as the browser page shipped
with the server and is handy for smoke tests and scripts::

    api = NudgeAPI(base_url="http://localhost:3000")
    event_id, error = api.create_event({"name": "Launch"})
    nudges, error = api.nudges_for_event(event_id)

Every method returns a tuple ``(data, error)``.  On success ``error``
is ``None``; on failure ``data`` is empty and ``error`` is a dictionary
with the keys ``status_code`` and ``message``.  Files are passed as
``{"image": open("banner.png", "rb")}`` (or any value accepted by the
``files`` argument of ``requests``).
"""

from __future__ import annotations

import json
import logging
from typing import Any, Dict, List, Optional, Tuple

import requests


logger = logging.getLogger(__name__)

Error = Dict[str, Any]


class NudgeAPI:
    """Client for the events and nudges endpoints."""

    def __init__(
        self,
        *,
        base_url: str,
        api_prefix: str = "/api/v3/app",
        session: Optional[requests.Session] = None,
        timeout: float = 15,
    ) -> None:
        """Initialise the API client.

        Args:
            base_url: Server root, e.g. ``http://localhost:3000``.
            api_prefix: Prefix of the resource routes.
            session: Optional requests session.  If not supplied a
                session will be created automatically.
            timeout: Seconds to wait for each response.
        """
        self.base_url = base_url.rstrip("/")
        self.api_prefix = "/" + api_prefix.strip("/") if api_prefix.strip("/") else ""
        self.session = session or requests.Session()
        self.timeout = timeout

    # ------------------------------------------------------------------
    # Low level HTTP helpers
    # ------------------------------------------------------------------
    def _request(
        self,
        method: str,
        path: str,
        *,
        params: Dict[str, Any] | None = None,
        data: Dict[str, Any] | None = None,
        files: Dict[str, Any] | None = None,
        root: bool = False,
    ) -> Tuple[Optional[Any], Optional[Error]]:
        """Perform an HTTP request to the API.

        Args:
            method: HTTP method (``GET``, ``POST``, ``PUT``, ``DELETE``).
            path: Path relative to the API prefix (e.g. ``/events``).
            params: Query parameters.
            data: Form fields, sent as multipart when ``files`` is given.
            files: File parts.
            root: Resolve ``path`` against the server root instead of
                the API prefix.
        Returns:
            A tuple ``(data, error)``.
        """
        url = f"{self.base_url}{'' if root else self.api_prefix}{path}"
        try:
            logger.debug("Sending %s request to %s", method, url)
            response = self.session.request(
                method=method,
                url=url,
                params=params,
                data=data,
                files=files,
                timeout=self.timeout,
            )
            response.raise_for_status()
            if response.content:
                return response.json(), None
            return None, None
        except requests.HTTPError as exc:
            status = exc.response.status_code if exc.response is not None else None
            message = ""
            if exc.response is not None:
                try:
                    err_json = exc.response.json()
                    message = err_json.get("error") or err_json.get("detail") or str(err_json)
                except ValueError:
                    message = exc.response.text
            if not message:
                message = str(exc)
            logger.error("API request failed (%s): %s", status, message)
            return None, {"status_code": status, "message": message}
        except requests.RequestException as exc:
            logger.error("API request failed: %s", exc)
            return None, {"status_code": None, "message": str(exc)}

    @staticmethod
    def _form(fields: Dict[str, Any]) -> Dict[str, str]:
        """Encode field values the way the server expects them.

        ``None`` is sent as an empty string, which clears the field on
        update.  Lists (``attendees``) are JSON encoded.
        """
        form: Dict[str, str] = {}
        for name, value in fields.items():
            if value is None:
                form[name] = ""
            elif isinstance(value, (list, dict)):
                form[name] = json.dumps(value)
            else:
                form[name] = str(value)
        return form

    # ------------------------------------------------------------------
    # Service
    # ------------------------------------------------------------------
    def health(self) -> Tuple[Optional[Dict[str, Any]], Optional[Error]]:
        return self._request("GET", "/health", root=True)

    # ------------------------------------------------------------------
    # Event operations
    # ------------------------------------------------------------------
    def list_events(self) -> Tuple[List[Dict[str, Any]], Optional[Error]]:
        """Retrieve all events."""
        data, error = self._request("GET", "/events")
        if error:
            return [], error
        return data.get("events", []), None

    def latest_events(
        self, page: int = 1, limit: int = 5
    ) -> Tuple[Optional[Dict[str, Any]], Optional[Error]]:
        """Retrieve one page of events, latest schedule first.

        Returns:
            A tuple ``(page, error)`` where ``page`` holds ``events`` and
            ``pagination``.
        """
        return self._request("GET", "/events", params={"type": "latest", "page": page, "limit": limit})

    def get_event(self, event_id: str) -> Tuple[Optional[Dict[str, Any]], Optional[Error]]:
        return self._request("GET", "/events", params={"id": event_id})

    def create_event(
        self, fields: Dict[str, Any], files: Dict[str, Any] | None = None
    ) -> Tuple[Optional[str], Optional[Error]]:
        """Create an event.

        Returns:
            A tuple ``(event_id, error)``.
        """
        data, error = self._request("POST", "/events", data=self._form(fields), files=files)
        if error:
            return None, error
        return data.get("event_id"), None

    def update_event(
        self, event_id: str, fields: Dict[str, Any], files: Dict[str, Any] | None = None
    ) -> Tuple[Optional[Dict[str, Any]], Optional[Error]]:
        """Update the given fields of an event; others are left alone."""
        return self._request("PUT", f"/events/{event_id}", data=self._form(fields), files=files)

    def delete_event(self, event_id: str) -> Tuple[bool, Optional[Error]]:
        data, error = self._request("DELETE", f"/events/{event_id}")
        if error:
            return False, error
        return data is not None, None

    # ------------------------------------------------------------------
    # Nudge operations
    # ------------------------------------------------------------------
    def list_nudges(self) -> Tuple[List[Dict[str, Any]], Optional[Error]]:
        data, error = self._request("GET", "/nudges")
        if error:
            return [], error
        return data.get("nudges", []), None

    def latest_nudges(
        self, page: int = 1, limit: int = 10
    ) -> Tuple[Optional[Dict[str, Any]], Optional[Error]]:
        return self._request("GET", "/nudges", params={"type": "latest", "page": page, "limit": limit})

    def nudges_for_event(self, event_id: str) -> Tuple[List[Dict[str, Any]], Optional[Error]]:
        """Retrieve the nudges attached to an event."""
        data, error = self._request("GET", "/nudges", params={"event_id": event_id})
        if error:
            return [], error
        return data.get("nudges", []), None

    def get_nudge(self, nudge_id: str) -> Tuple[Optional[Dict[str, Any]], Optional[Error]]:
        return self._request("GET", "/nudges", params={"id": nudge_id})

    def create_nudge(
        self, fields: Dict[str, Any], files: Dict[str, Any] | None = None
    ) -> Tuple[Optional[str], Optional[Error]]:
        """Create a nudge.

        Returns:
            A tuple ``(nudge_id, error)``.
        """
        data, error = self._request("POST", "/nudges", data=self._form(fields), files=files)
        if error:
            return None, error
        return data.get("nudge_id"), None

    def update_nudge(
        self, nudge_id: str, fields: Dict[str, Any], files: Dict[str, Any] | None = None
    ) -> Tuple[Optional[Dict[str, Any]], Optional[Error]]:
        return self._request("PUT", f"/nudges/{nudge_id}", data=self._form(fields), files=files)

    def delete_nudge(self, nudge_id: str) -> Tuple[bool, Optional[Error]]:
        data, error = self._request("DELETE", f"/nudges/{nudge_id}")
        if error:
            return False, error
        return data is not None, None
