"""
Copyright (C) 2026 Garudex Labs.  All Rights Reserved.
Permit Setup, a product of Garudex Labs

Adapter contract between ``PermitApiClient`` and the wire.

An adapter turns one ``ApiRequest`` into one ``ApiResponse`` whatever the
status code, and raises ``TransportError`` only when no response arrived.
"""

from __future__ import annotations

import json
from abc import ABC, abstractmethod
from dataclasses import dataclass
from typing import Any


@dataclass(frozen=True)
class ApiRequest:
    """One call: method, path relative to the adapter's base URL, JSON body."""

    method: str
    path: str
    body: Any = None

    @property
    def target(self) -> str:
        return f"{self.method} {self.path}"


@dataclass(frozen=True)
class ApiResponse:
    status_code: int
    body: Any = None
    text: str = ""
    elapsed_ms: float = 0.0

    @property
    def ok(self) -> bool:
        return 200 <= self.status_code < 300

    @classmethod
    def parse(cls, status_code: int, text: str, elapsed_ms: float = 0.0) -> "ApiResponse":
        """Decode ``text`` as JSON; an empty or non-JSON body leaves ``body`` as None."""
        try:
            body = json.loads(text) if text else None
        except ValueError:
            body = None
        return cls(status_code=status_code, body=body, text=text, elapsed_ms=elapsed_ms)


class BaseAdapter(ABC):

    @abstractmethod
    async def send(self, request: ApiRequest) -> ApiResponse:
        """Send a request and return the response."""

    @abstractmethod
    async def close(self) -> None:
        """Release connections; the adapter may be reused afterwards."""
