"""
Scope resolution: enlarge the comparison universe with related policies.
"""
import logging
from typing import List, Optional, Sequence

from conflict_engine.config import settings
from conflict_engine.models.policies import PolicyRef

logger = logging.getLogger(__name__)


class ScopeResolver:
    """Finds known policies comparable with a selection."""

    def __init__(self, cap: Optional[int] = None):
        self.cap = cap if cap is not None else settings.RELATED_POLICY_CAP

    def expand(self, selected: Sequence[PolicyRef], all_known: Sequence[PolicyRef],
               cap: Optional[int] = None) -> List[PolicyRef]:
        """
        Find unselected policies sharing platform and family with a selected one.

        Candidates keep their listing order; when more qualify than the cap,
        the first ones in that order are kept.

        Args:
            selected: Policies chosen by the user
            all_known: Every policy in the listing, in listing order
            cap: Maximum number of related policies; defaults to the resolver's cap

        Returns:
            Related policies, at most cap of them
        """
        limit = self.cap if cap is None else cap
        selected_ids = {policy.id for policy in selected}
        scopes = {(policy.platform, policy.family_kind) for policy in selected}

        related = []
        seen_ids = set()
        for policy in all_known:
            if policy.id in selected_ids or policy.id in seen_ids:
                continue
            if (policy.platform, policy.family_kind) in scopes:
                related.append(policy)
                seen_ids.add(policy.id)

        logger.info(f"Found {len(related)} related policies for conflict comparison")
        if len(related) > limit:
            logger.info(f"Limiting related policies to {limit}")
            related = related[:max(limit, 0)]
        return related
