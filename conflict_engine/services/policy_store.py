"""
Policy-store clients supplying policy listings, details and directory lookups.
"""
import copy
import logging
from abc import ABC, abstractmethod
from typing import Any, Dict, List, Mapping, Optional, Sequence

from conflict_engine.exceptions import PolicyStoreError
from conflict_engine.models.policies import PolicyDetail, PolicyRef

logger = logging.getLogger(__name__)


class PolicyStoreClient(ABC):
    """Abstract async client for an external policy store."""

    @abstractmethod
    async def list_policies(self) -> List[PolicyRef]:
        """Every known policy, in listing order."""
        pass

    @abstractmethod
    async def fetch_policy_detail(self, policy: PolicyRef) -> Optional[PolicyDetail]:
        """
        Fetch a policy's detail payload.

        Args:
            policy: Policy to fetch

        Returns:
            Detail payload shaped for the policy's family, with an
            "assignments" list when assignments are known
        """
        pass

    @abstractmethod
    async def resolve_group(self, group_id: str) -> Dict[str, Any]:
        """Look up a directory group: name, type, memberCount."""
        pass

    @abstractmethod
    async def resolve_filter(self, filter_id: str) -> Dict[str, Any]:
        """Look up an assignment filter: name, rule, platform."""
        pass


class InMemoryPolicyStore(PolicyStoreClient):
    """Policy store over data already held in memory, e.g. a request body."""

    def __init__(self, policies: Sequence[PolicyRef],
                 details: Mapping[str, Optional[PolicyDetail]],
                 groups: Optional[Mapping[str, Dict[str, Any]]] = None,
                 filters: Optional[Mapping[str, Dict[str, Any]]] = None):
        self.policies = list(policies)
        self.details = dict(details)
        self.groups = dict(groups or {})
        self.filters = dict(filters or {})

    async def list_policies(self) -> List[PolicyRef]:
        return list(self.policies)

    async def fetch_policy_detail(self, policy: PolicyRef) -> Optional[PolicyDetail]:
        detail = self.details.get(policy.id)
        return copy.deepcopy(detail) if detail is not None else None

    async def resolve_group(self, group_id: str) -> Dict[str, Any]:
        if group_id not in self.groups:
            raise PolicyStoreError(f"Unknown group: {group_id}")
        return dict(self.groups[group_id])

    async def resolve_filter(self, filter_id: str) -> Dict[str, Any]:
        if filter_id not in self.filters:
            raise PolicyStoreError(f"Unknown assignment filter: {filter_id}")
        return dict(self.filters[filter_id])
