# app/client/api.py
"""
Python client for the health API, used by the UI session and scripts.

Every method maps to one server action. Habit and vital fetches go through a
per-session DataCache; saving new entries invalidates the matching kind.
"""
import logging
from typing import Any, Dict, List, Optional

import httpx

from app.client.cache import DataCache

logger = logging.getLogger(__name__)

API_PATH = "/api/health"


class HealthAPIError(Exception):
    """Raised for any non-2xx response; carries the server's `error` message."""

    def __init__(self, status_code: int, message: str):
        super().__init__(f"{status_code}: {message}")
        self.status_code = status_code
        self.message = message


class HealthClient:
    def __init__(
        self,
        base_url: str,
        token: str,
        cache: Optional[DataCache] = None,
        transport: Optional[httpx.BaseTransport] = None,
        timeout: float = 10.0,
    ):
        self.cache = cache if cache is not None else DataCache()
        self._http = httpx.Client(
            base_url=base_url,
            headers={"Authorization": f"Bearer {token}"},
            transport=transport,
            timeout=timeout,
        )

    def close(self) -> None:
        self._http.close()

    def __enter__(self):
        return self

    def __exit__(self, *exc):
        self.close()

    def _call(
        self,
        method: str,
        action: str,
        params: Optional[Dict[str, Any]] = None,
        body: Optional[Dict[str, Any]] = None,
    ) -> Dict[str, Any]:
        query = {"action": action}
        query.update({k: v for k, v in (params or {}).items() if v is not None})
        response = self._http.request(method, API_PATH, params=query, json=body)
        if response.is_success:
            return response.json()

        try:
            message = response.json().get("error") or response.reason_phrase
        except ValueError:
            message = response.text or response.reason_phrase
        logger.warning(f"{action} failed with {response.status_code}: {message}")
        raise HealthAPIError(response.status_code, message)

    # ---------------------------------------------------------------- profiles ----
    def me(self) -> Optional[Dict[str, Any]]:
        return self._call("GET", "me")["profile"]

    def get_profile(self, user_id: str) -> Dict[str, Any]:
        return self._call("GET", "profile.get", params={"user_id": user_id})

    def save_profile(self, role: str, name: Optional[str] = None, **detail) -> Dict[str, Any]:
        body = {"role": role, "name": name, role: detail}
        return self._call("POST", "profile.upsert", body=body)["profile"]

    # ----------------------------------------------------------- daily records ----
    def _fetch(self, kind: str, user_id: Optional[str], range_days: int) -> List[Dict[str, Any]]:
        key = (user_id or "self", range_days)
        cached = self.cache.get(kind, key)
        if cached is not None:
            return cached
        items = self._call(
            "GET", f"{kind}.fetch", params={"user_id": user_id, "rangeDays": range_days}
        )["items"]
        self.cache.set(kind, key, items)
        return items

    def fetch_habits(self, user_id: Optional[str] = None, range_days: int = 7) -> List[Dict[str, Any]]:
        return self._fetch("habits", user_id, range_days)

    def fetch_vitals(self, user_id: Optional[str] = None, range_days: int = 7) -> List[Dict[str, Any]]:
        return self._fetch("vitals", user_id, range_days)

    def save_habits(self, date: Optional[str] = None, **values) -> None:
        self._call("POST", "habits.upsert", body={"date": date, **values})
        self.cache.invalidate("habits")

    def save_vitals(self, date: Optional[str] = None, **values) -> None:
        self._call("POST", "vitals.upsert", body={"date": date, **values})
        self.cache.invalidate("vitals")

    # ------------------------------------------------------------ directory ----
    def list_doctors(self) -> List[Dict[str, Any]]:
        return self._call("GET", "doctors.list")["items"]

    def select_doctor(self, doctor_id: str) -> None:
        self._call("POST", "link.select", body={"doctor_id": doctor_id})

    def select_patient(self, patient_email: str) -> None:
        self._call("POST", "link.select", body={"patient_email": patient_email})
        # a new mutual link can expose data this session couldn't read before
        self.cache.invalidate()

    def list_links(self) -> List[Dict[str, Any]]:
        return self._call("GET", "link.list")["items"]
