"""Blocking JSON-over-HTTP transport for identity service calls."""

from __future__ import annotations

import json
from abc import ABC, abstractmethod
from dataclasses import dataclass
from typing import Any, Dict, Optional
from http import client as http_client
from urllib import error, parse, request

from ..errors import AuthenticationUnavailableError


@dataclass(frozen=True)
class HttpResponse:
    status: int
    body: Optional[Dict[str, Any]] = None


class Transport(ABC):
    """Performs one HTTP exchange. Implementations block the calling thread."""

    @abstractmethod
    def request(
        self,
        method: str,
        url: str,
        *,
        payload: Optional[Dict[str, Any]] = None,
        query: Optional[Dict[str, str]] = None,
    ) -> HttpResponse:
        """Send the request and return status plus decoded JSON body.

        Network-level failures raise :class:`AuthenticationUnavailableError`.
        HTTP error statuses are returned, not raised.
        """


class UrllibTransport(Transport):
    """``urllib``-backed transport with a bounded timeout and optional proxy."""

    def __init__(self, *, timeout_s: float = 10.0, proxy_url: Optional[str] = None) -> None:
        self.timeout_s = timeout_s
        handlers = []
        if proxy_url:
            handlers.append(request.ProxyHandler({"http": proxy_url, "https": proxy_url}))
        self._opener = request.build_opener(*handlers)

    def request(
        self,
        method: str,
        url: str,
        *,
        payload: Optional[Dict[str, Any]] = None,
        query: Optional[Dict[str, str]] = None,
    ) -> HttpResponse:
        data = json.dumps(payload).encode("utf-8") if payload is not None else None
        headers = {"Accept": "application/json"}
        if data is not None:
            headers["Content-Type"] = "application/json"

        try:
            if query:
                url = f"{url}?{parse.urlencode(query)}"
            req = request.Request(url=url, data=data, headers=headers, method=method)
            with self._opener.open(req, timeout=self.timeout_s) as resp:
                return HttpResponse(status=resp.status, body=_decode(resp.read()))
        except error.HTTPError as exc:
            return HttpResponse(status=exc.code, body=_read_error_body(exc))
        except (error.URLError, http_client.HTTPException, TimeoutError, OSError, ValueError) as exc:
            raise AuthenticationUnavailableError(f"Cannot contact identity service: {exc}") from exc


def _decode(raw: bytes) -> Optional[Dict[str, Any]]:
    if not raw:
        return None
    try:
        parsed = json.loads(raw.decode("utf-8"))
    except (UnicodeDecodeError, json.JSONDecodeError):
        return None
    return parsed if isinstance(parsed, dict) else None


def _read_error_body(exc: error.HTTPError) -> Optional[Dict[str, Any]]:
    try:
        return _decode(exc.read())
    except (http_client.HTTPException, OSError):
        return None
