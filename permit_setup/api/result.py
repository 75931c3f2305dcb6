"""
Copyright (C) 2026 Garudex Labs.  All Rights Reserved.
Permit Setup, a product of Garudex Labs

Normalized outcome of one administrative API call.
"""

from dataclasses import dataclass
from enum import Enum
from typing import Any, Optional


class ResultKind(Enum):
    """How a call ended."""
    OK = "ok"                            # 2xx
    EXISTS = "exists"                    # 409, the entity is already present
    REJECTED = "rejected"                # any other status
    TRANSPORT_ERROR = "transport_error"  # no response: network failure or timeout


@dataclass(frozen=True)
class ApiResult:
    """
    Tagged result of ``PermitApiClient.call``.

    ``success`` is true for OK and EXISTS; a 409 is never a failure.
    ``status`` is None only for transport errors, and ``error`` is set only
    for them.

    Attributes:
        kind: Result discriminant
        status: HTTP status code, if a response was received
        data: Parsed JSON body, or None when absent or not JSON
        error: Transport error message
    """

    kind: ResultKind
    status: Optional[int] = None
    data: Any = None
    error: Optional[str] = None

    @property
    def success(self) -> bool:
        return self.kind in (ResultKind.OK, ResultKind.EXISTS)

    @property
    def exists(self) -> bool:
        return self.kind is ResultKind.EXISTS

    @property
    def not_found(self) -> bool:
        return self.status == 404

    @classmethod
    def ok(cls, status: int, data: Any = None) -> "ApiResult":
        return cls(kind=ResultKind.OK, status=status, data=data)

    @classmethod
    def conflict(cls, data: Any = None) -> "ApiResult":
        return cls(kind=ResultKind.EXISTS, status=409, data=data)

    @classmethod
    def rejected(cls, status: int, data: Any = None) -> "ApiResult":
        return cls(kind=ResultKind.REJECTED, status=status, data=data)

    @classmethod
    def transport_error(cls, message: str) -> "ApiResult":
        return cls(kind=ResultKind.TRANSPORT_ERROR, error=message)

    @classmethod
    def timeout(cls, seconds: float) -> "ApiResult":
        return cls.transport_error(f"request timed out after {seconds:g}s")

    @classmethod
    def from_status(cls, status: int, data: Any = None) -> "ApiResult":
        """Classify a received response by its status code."""
        if 200 <= status < 300:
            return cls.ok(status, data)
        if status == 409:
            return cls.conflict(data)
        return cls.rejected(status, data)

    def to_dict(self) -> dict:
        """The ``{success, data, status, exists?, error?}`` view of the result."""
        result = {"success": self.success, "data": self.data, "status": self.status}
        if self.exists:
            result["exists"] = True
        if self.error is not None:
            result["error"] = self.error
        return result
