"""
Copyright (C) 2026 Garudex Labs.  All Rights Reserved.
Permit Setup, a product of Garudex Labs

Shared create/list/get/delete semantics for entity repositories.

- create succeeds on 2xx and on 409 (already present)
- list never raises and never returns None; failures yield ``[]``
- delete succeeds on 2xx and on 404 (already absent)
"""

from typing import Any, Callable, Dict, List, Optional, TypeVar

from permit_setup.api.client import PermitApiClient
from permit_setup.api.result import ApiResult
from permit_setup.exceptions import ValidationError
from permit_setup.logging_config import get_logger, log_entity_outcome

logger = get_logger(__name__)

T = TypeVar("T")


class BaseRepository:
    """
    Thin typed facade over ``PermitApiClient`` for one entity class.

    Subclasses set ``entity`` (the label used in log events) and build
    scoped paths with ``self.config``.
    """

    entity = "entity"

    def __init__(self, client: PermitApiClient):
        self.client = client
        self.config = client.config

    async def _create(self, path: str, payload: Dict[str, Any], key: str) -> ApiResult:
        result = await self.client.call("POST", path, payload)
        if result.exists:
            log_entity_outcome(logger, self.entity, key, "create", "exists")
        elif result.success:
            log_entity_outcome(logger, self.entity, key, "create", "created")
        else:
            log_entity_outcome(
                logger, self.entity, key, "create", "failed",
                status=result.status, error=result.error,
            )
        return result

    async def _list_raw(self, path: str) -> List[Dict[str, Any]]:
        result = await self.client.call("GET", path)
        if not result.success:
            return []
        data = result.data
        # Some endpoints wrap collections as {"data": [...]}
        if isinstance(data, dict) and isinstance(data.get("data"), list):
            data = data["data"]
        if not isinstance(data, list):
            logger.warning(f"{self.entity}_list_unexpected_payload", path=path)
            return []
        return [item for item in data if isinstance(item, dict)]

    async def _list(self, path: str, parse: Callable[[Dict[str, Any]], T]) -> List[T]:
        items = []
        for raw in await self._list_raw(path):
            try:
                items.append(parse(raw))
            except (KeyError, ValueError, TypeError, ValidationError) as e:
                logger.warning(
                    f"{self.entity}_skipped_unparseable",
                    key=raw.get("key"),
                    error=str(e),
                )
        return items

    async def _get(self, path: str) -> Optional[Dict[str, Any]]:
        result = await self.client.call("GET", path)
        if result.success and isinstance(result.data, dict):
            return result.data
        return None

    async def _delete(self, path: str, key: str, body: Any = None) -> bool:
        result = await self.client.call("DELETE", path, body)
        if result.success:
            log_entity_outcome(logger, self.entity, key, "delete", "deleted")
            return True
        if result.not_found:
            log_entity_outcome(logger, self.entity, key, "delete", "absent")
            return True
        log_entity_outcome(
            logger, self.entity, key, "delete", "failed",
            status=result.status, error=result.error,
        )
        return False
