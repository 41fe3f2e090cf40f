"""
Request-scoped caches for directory group and assignment filter lookups.
"""
import asyncio
import logging
from typing import Any, Awaitable, Callable, Dict

logger = logging.getLogger(__name__)


class RequestLookupCache:
    """
    Group and filter lookups shared by every policy of one analysis request.

    Each id is looked up at most once per request: concurrent callers await
    the same in-flight task. A failed lookup resolves to a placeholder.
    Create one instance per request; never share it between requests.
    """

    def __init__(self, store):
        self.store = store
        self._groups: Dict[str, asyncio.Future] = {}
        self._filters: Dict[str, asyncio.Future] = {}

    async def resolve_group(self, group_id: str) -> Dict[str, Any]:
        return await self._lookup(self._groups, group_id, self.store.resolve_group, {
            "id": group_id,
            "name": group_id,
            "type": "Entra ID Group",
            "memberCount": 0,
        })

    async def resolve_filter(self, filter_id: str) -> Dict[str, Any]:
        return await self._lookup(self._filters, filter_id, self.store.resolve_filter, {
            "name": filter_id,
            "rule": "",
            "platform": "",
        })

    @property
    def group_count(self) -> int:
        return len(self._groups)

    @property
    def filter_count(self) -> int:
        return len(self._filters)

    async def _lookup(self, cache: Dict[str, asyncio.Future], entity_id: str,
                      fetch: Callable[[str], Awaitable[Dict[str, Any]]],
                      placeholder: Dict[str, Any]) -> Dict[str, Any]:
        if entity_id not in cache:
            cache[entity_id] = asyncio.ensure_future(self._fetch(fetch, entity_id, placeholder))
        return await cache[entity_id]

    async def _fetch(self, fetch: Callable[[str], Awaitable[Dict[str, Any]]], entity_id: str,
                     placeholder: Dict[str, Any]) -> Dict[str, Any]:
        try:
            return await fetch(entity_id)
        except Exception as e:
            logger.warning(f"Lookup failed for {entity_id}: {str(e)}")
            return placeholder
