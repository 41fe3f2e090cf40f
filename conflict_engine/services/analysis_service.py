"""
Setting conflict analysis service.
"""
import asyncio
import logging
import uuid
from datetime import datetime, timezone
from typing import Dict, List, Optional, Sequence

from conflict_engine.core.assignments import summarize_assignments
from conflict_engine.core.conflict_detector import ConflictDetector
from conflict_engine.core.scope_resolver import ScopeResolver
from conflict_engine.exceptions import AnalysisError, PolicyNotFoundError
from conflict_engine.models.conflicts import ConflictAnalysisReport
from conflict_engine.models.policies import PolicyAssignments, PolicyDetail, PolicyRef
from conflict_engine.services.lookup_cache import RequestLookupCache
from conflict_engine.services.policy_store import PolicyStoreClient

logger = logging.getLogger(__name__)


class ConflictAnalysisService:
    """Runs setting conflict analyses against a policy store."""

    def __init__(self, store: PolicyStoreClient, related_policy_cap: Optional[int] = None,
                 conflict_detector: Optional[ConflictDetector] = None):
        """Initialize the scope resolver and conflict detector."""
        self.store = store
        self.scope_resolver = ScopeResolver(related_policy_cap)
        self.conflict_detector = conflict_detector or ConflictDetector()

    async def analyze(self, selected_policy_ids: Sequence[str]) -> ConflictAnalysisReport:
        """
        Run a complete setting conflict analysis.

        Args:
            selected_policy_ids: Ids of the policies chosen by the user

        Returns:
            Conflict analysis report over the selection and its related policies

        Raises:
            AnalysisError: If no policies were selected
            PolicyNotFoundError: If none of the selected policies exist
        """
        if not selected_policy_ids:
            raise AnalysisError("No policies selected")

        # a. Resolve the selection against the listing
        all_known = await self.store.list_policies()
        wanted = set(selected_policy_ids)
        selected = [policy for policy in all_known if policy.id in wanted]
        if not selected:
            raise PolicyNotFoundError(list(selected_policy_ids))
        missing = wanted - {policy.id for policy in selected}
        if missing:
            logger.warning(f"Ignoring unknown policy ids: {', '.join(sorted(missing))}")

        # b. Enlarge the comparison universe
        related = self.scope_resolver.expand(selected, all_known)
        universe = selected + related
        logger.info(f"Fetching details for {len(selected)} selected and {len(related)} related policies")

        lookups = RequestLookupCache(self.store)

        # c. Fetch every detail concurrently, one failure never fails the rest
        details = await asyncio.gather(*(self._fetch_detail(policy) for policy in universe))
        details_by_policy: Dict[str, Optional[PolicyDetail]] = {
            policy.id: detail for policy, detail in zip(universe, details)
        }

        # d. Classify settings
        classification = self.conflict_detector.classify(universe, details_by_policy)

        # e. Describe assignment scope of the selected policies
        assignments = await self._summarize_assignments(selected, details_by_policy, lookups)

        return ConflictAnalysisReport(
            analysis_id=str(uuid.uuid4()),
            generated_at=datetime.now(timezone.utc),
            selected_policy_ids=[policy.id for policy in selected],
            related_policy_ids=[policy.id for policy in related],
            setting_conflicts=classification.conflicts,
            all_settings=classification.all_settings,
            assignments=assignments
        )

    async def _fetch_detail(self, policy: PolicyRef) -> Optional[PolicyDetail]:
        try:
            return await self.store.fetch_policy_detail(policy)
        except Exception as e:
            logger.error(f"Failed to fetch details for policy \"{policy.name}\" ({policy.id}): {str(e)}")
            return None

    async def _summarize_assignments(self, policies: List[PolicyRef],
                                     details_by_policy: Dict[str, Optional[PolicyDetail]],
                                     lookups: RequestLookupCache) -> Dict[str, PolicyAssignments]:
        async def summarize(policy: PolicyRef) -> PolicyAssignments:
            try:
                return await summarize_assignments(details_by_policy.get(policy.id), lookups)
            except Exception as e:
                logger.error(f"Failed to summarize assignments for policy \"{policy.name}\" ({policy.id}): {str(e)}")
                return PolicyAssignments()

        summaries = await asyncio.gather(*(summarize(policy) for policy in policies))
        logger.debug(f"Resolved {lookups.group_count} groups and {lookups.filter_count} filters")
        return {policy.id: summary for policy, summary in zip(policies, summaries)}
