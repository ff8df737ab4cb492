from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Any, Optional

import requests

from config import AppConfig


logger = logging.getLogger(__name__)

UNIQUE_VIOLATION = "23505"


class RemoteStoreError(RuntimeError):
    def __init__(self, message: str, status: Optional[int] = None, code: Optional[str] = None):
        super().__init__(message)
        self.status = status
        self.code = code


class NotConfiguredError(RemoteStoreError):
    pass


@dataclass(frozen=True)
class ConnectionStatus:
    connected: bool
    error: Optional[str] = None


class RestClient:
    """
    Thin Supabase REST (PostgREST) client.

    - Every call is one blocking HTTP request; failures surface as RemoteStoreError.
    - Filters are passed as PostgREST query params, see data/queries.py.
    """

    def __init__(self, cfg: AppConfig, session: Optional[requests.Session] = None):
        self.cfg = cfg
        self._session = session or requests.Session()
        key = cfg.supabase_anon_key or ""
        self._headers = {
            "apikey": key,
            "Authorization": f"Bearer {key}",
            "Content-Type": "application/json",
        }

    def is_configured(self) -> bool:
        return self.cfg.is_configured

    def close(self) -> None:
        self._session.close()

    def _request(
        self,
        method: str,
        path: str,
        params: Optional[dict[str, Any]] = None,
        json: Any = None,
        prefer: Optional[str] = None,
    ) -> requests.Response:
        if not self.is_configured():
            raise NotConfiguredError("Supabase URL / anon key not configured")

        headers = dict(self._headers)
        if prefer:
            headers["Prefer"] = prefer
        url = f"{self.cfg.rest_url}/{path.lstrip('/')}"
        try:
            resp = self._session.request(
                method,
                url,
                params=params,
                json=json,
                headers=headers,
                timeout=self.cfg.request_timeout,
            )
        except requests.RequestException as e:
            raise RemoteStoreError(f"{method} {path} failed: {e}") from e

        if resp.status_code >= 300:
            code = None
            message = resp.text
            try:
                body = resp.json()
                code = body.get("code")
                message = body.get("message") or message
            except ValueError:
                pass
            raise RemoteStoreError(
                f"{method} {path} returned {resp.status_code}: {message}",
                status=resp.status_code,
                code=code,
            )
        return resp

    def select(self, table: str, params: dict[str, Any]) -> list[dict[str, Any]]:
        resp = self._request("GET", table, params=params)
        data = resp.json()
        return data if isinstance(data, list) else [data]

    def count(self, table: str, params: dict[str, Any]) -> int:
        resp = self._request("HEAD", table, params=params, prefer="count=exact")
        # Content-Range looks like "0-9/42" or "*/0"
        content_range = resp.headers.get("Content-Range", "")
        total = content_range.rsplit("/", 1)[-1]
        if not total.isdigit():
            raise RemoteStoreError(f"No exact count in Content-Range {content_range!r} for {table}")
        return int(total)

    def insert(self, table: str, rows: list[dict[str, Any]]) -> None:
        self._request("POST", table, json=rows, prefer="return=minimal")

    def update(self, table: str, values: dict[str, Any], params: dict[str, Any]) -> list[dict[str, Any]]:
        resp = self._request("PATCH", table, params=params, json=values, prefer="return=representation")
        return resp.json() if resp.content else []

    def delete(self, table: str, params: dict[str, Any]) -> None:
        self._request("DELETE", table, params=params, prefer="return=minimal")

    def rpc(self, function: str, args: dict[str, Any]) -> Any:
        resp = self._request("POST", f"rpc/{function}", json=args)
        return resp.json() if resp.content else None

    def ping(self) -> ConnectionStatus:
        if not self.is_configured():
            return ConnectionStatus(connected=False, error="Supabase environment variables not configured")
        try:
            self.select("categories", {"select": "id", "limit": 1})
        except RemoteStoreError as e:
            logger.error("Supabase connection test failed: %s", e)
            return ConnectionStatus(connected=False, error=str(e))
        return ConnectionStatus(connected=True)


def get_rest_client(cfg: AppConfig) -> RestClient:
    return RestClient(cfg=cfg)
