"""Trip Planner API client.

This module defines a small client wrapper around the Trip Planner REST
API.  It uses the ``requests`` library internally and mirrors what the
browser front end does:

* :meth:`signup` / :meth:`login` – authenticate and remember the
  returned session token.
* :meth:`logout` – revoke the session and forget the token.
* :meth:`current_user` – fetch the authenticated user.
* :meth:`generate_trip`, :meth:`list_trips`, :meth:`get_trip`,
  :meth:`update_trip`, :meth:`delete_trip` – trip operations.
* :meth:`share_trip`, :meth:`export_trip` – share summary and printable
  itinerary.
* :meth:`ping` – health check.

Every method returns a tuple ``(data, error)``.  On success ``error`` is
``None``; on failure ``data`` is ``None`` (or empty) and ``error`` is a
dictionary with ``status_code`` and ``message`` keys.
"""

from __future__ import annotations

import logging
from typing import Any, Dict, List, Optional, Tuple

import requests


logger = logging.getLogger(__name__)

Error = Dict[str, Any]


class TripPlannerAPI:
    """Client for the Trip Planner API.

    The session token returned by :meth:`signup` or :meth:`login` is kept
    on the instance and sent as ``Authorization: Bearer <token>`` on all
    later requests.  Pass ``session_token`` to resume an earlier session.
    """

    def __init__(
        self,
        *,
        base_url: str,
        session_token: Optional[str] = None,
        session: Optional[requests.Session] = None,
        timeout: float = 15,
    ) -> None:
        """Initialise the API client.

        Args:
            base_url: Base URL including the API prefix, e.g.
                ``http://localhost:8000/api/v1``.
            session_token: Optional token from an earlier login.
            session: Optional requests session.  If not supplied a
                session will be created automatically.
            timeout: Per-request timeout in seconds.
        """
        self.base_url = base_url.rstrip("/")
        self.session_token = session_token
        self.session = session or requests.Session()
        self.timeout = timeout

    # ------------------------------------------------------------------
    # Low level HTTP helpers
    # ------------------------------------------------------------------
    def _request(
        self, method: str, path: str, *, json_body: Any | None = None, expect_json: bool = True
    ) -> Tuple[Optional[Any], Optional[Error]]:
        """Perform an HTTP request to the API.

        Args:
            method: HTTP method (``GET``, ``POST``, ``PUT``, ``DELETE``).
            path: Path relative to :attr:`base_url` (e.g. ``/trips``).
            json_body: JSON body to send with the request.
            expect_json: Parse the response as JSON (otherwise return text).
        Returns:
            A tuple ``(data, error)``.
        """
        url = f"{self.base_url}{path}"
        headers: Dict[str, str] = {}
        if self.session_token:
            headers["Authorization"] = f"Bearer {self.session_token}"
        try:
            logger.debug("Sending %s request to %s", method, url)
            response = self.session.request(
                method=method,
                url=url,
                json=json_body,
                headers=headers,
                timeout=self.timeout,
            )
            response.raise_for_status()
            if not response.content:
                return None, None
            return (response.json() if expect_json else response.text), None
        except requests.HTTPError as exc:
            status = exc.response.status_code if exc.response is not None else None
            message = ""
            if exc.response is not None:
                try:
                    err_json = exc.response.json()
                    message = err_json.get("message") or err_json.get("detail") or str(err_json)
                except ValueError:
                    message = exc.response.text
            if not message:
                message = str(exc)
            logger.error("API request failed (%s): %s", status, message)
            return None, {"status_code": status, "message": message}
        except requests.RequestException as exc:
            logger.error("API request failed: %s", exc)
            return None, {"status_code": None, "message": f"Network error: {exc}"}

    def _authenticate(self, path: str, payload: Dict[str, Any]) -> Tuple[Optional[Dict[str, Any]], Optional[Error]]:
        data, error = self._request("POST", path, json_body=payload)
        if error:
            return None, error
        self.session_token = data.get("sessionToken")
        return data.get("user"), None

    # ------------------------------------------------------------------
    # Authentication
    # ------------------------------------------------------------------
    def signup(self, name: str, email: str, password: str) -> Tuple[Optional[Dict[str, Any]], Optional[Error]]:
        return self._authenticate("/auth/signup", {"name": name, "email": email, "password": password})

    def login(self, email: str, password: str) -> Tuple[Optional[Dict[str, Any]], Optional[Error]]:
        return self._authenticate("/auth/login", {"email": email, "password": password})

    def logout(self) -> Tuple[bool, Optional[Error]]:
        """Revoke the current session.  The local token is cleared even on failure."""
        _, error = self._request("POST", "/auth/logout")
        self.session_token = None
        return error is None, error

    def current_user(self) -> Tuple[Optional[Dict[str, Any]], Optional[Error]]:
        data, error = self._request("GET", "/auth/me")
        if error:
            return None, error
        return data.get("user"), None

    # ------------------------------------------------------------------
    # Trips
    # ------------------------------------------------------------------
    def generate_trip(
        self,
        destination: str,
        start_date: str,
        end_date: str,
        *,
        travelers: int = 1,
        budget: Optional[int] = None,
        interests: Optional[List[str]] = None,
    ) -> Tuple[Optional[Dict[str, Any]], Optional[Error]]:
        """Generate a trip.  Dates are ISO strings (``YYYY-MM-DD``)."""
        payload: Dict[str, Any] = {
            "destination": destination,
            "startDate": start_date,
            "endDate": end_date,
            "travelers": travelers,
            "interests": interests or [],
        }
        if budget is not None:
            payload["budget"] = budget
        data, error = self._request("POST", "/trips/generate", json_body=payload)
        if error:
            return None, error
        return data.get("trip"), None

    def list_trips(self) -> Tuple[List[Dict[str, Any]], Optional[Error]]:
        data, error = self._request("GET", "/trips")
        if error:
            return [], error
        return data.get("trips", []), None

    def get_trip(self, trip_id: str) -> Tuple[Optional[Dict[str, Any]], Optional[Error]]:
        data, error = self._request("GET", f"/trips/{trip_id}")
        if error:
            return None, error
        return data.get("trip"), None

    def update_trip(self, trip_id: str, updates: Dict[str, Any]) -> Tuple[Optional[Dict[str, Any]], Optional[Error]]:
        data, error = self._request("PUT", f"/trips/{trip_id}", json_body=updates)
        if error:
            return None, error
        return data.get("trip"), None

    def delete_trip(self, trip_id: str) -> Tuple[bool, Optional[Error]]:
        _, error = self._request("DELETE", f"/trips/{trip_id}")
        return error is None, error

    def share_trip(self, trip_id: str) -> Tuple[Optional[str], Optional[Error]]:
        data, error = self._request("GET", f"/trips/{trip_id}/share")
        if error:
            return None, error
        return data.get("text"), None

    def export_trip(self, trip_id: str) -> Tuple[Optional[str], Optional[Error]]:
        return self._request("GET", f"/trips/{trip_id}/export", expect_json=False)

    def ping(self) -> Tuple[Optional[Dict[str, Any]], Optional[Error]]:
        return self._request("GET", "/ping")
