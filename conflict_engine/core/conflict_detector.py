"""
Setting-level conflict detection across policies.

Settings are grouped by (platform, family, definition id) and a group is a
conflict only when at least two distinct policies configure it to at least
two distinct normalized values.
"""
import logging
from typing import Dict, List, Mapping, Optional, Sequence

from conflict_engine.core.deep_links import get_portal_url
from conflict_engine.core.normalizers import normalize
from conflict_engine.families.factory import extract_settings
from conflict_engine.models.conflicts import (
    ComparisonGroup,
    ConflictClassification,
    PolicyValue,
    SettingComparison,
    SettingConflict,
)
from conflict_engine.models.policies import PolicyDetail, PolicyRef, ScopeKey

logger = logging.getLogger(__name__)


class ConflictDetector:
    """Engine for detecting conflicting setting values between policies."""

    def __init__(self, treat_not_configured_as_disabled: Optional[bool] = None, portal_base_url: Optional[str] = None):
        self.treat_not_configured_as_disabled = treat_not_configured_as_disabled
        self.portal_base_url = portal_base_url

    def group_settings(self, policies: Sequence[PolicyRef],
                       details_by_policy: Mapping[str, Optional[PolicyDetail]]) -> List[ComparisonGroup]:
        """
        Bucket every extracted setting by scope key.

        Args:
            policies: Comparison universe, in order
            details_by_policy: Policy id -> detail payload (None when the fetch failed)

        Returns:
            Comparison groups in discovery order
        """
        groups: Dict[ScopeKey, ComparisonGroup] = {}
        seen_policy_ids = set()

        for policy in policies:
            if policy.id in seen_policy_ids:
                continue
            seen_policy_ids.add(policy.id)

            for record in extract_settings(policy, details_by_policy.get(policy.id)):
                scope_key = ScopeKey(
                    platform=policy.platform,
                    family_kind=policy.family_kind,
                    definition_id=record.definition_id
                )
                group = groups.get(scope_key)
                if group is None:
                    group = ComparisonGroup(scope_key=scope_key)
                    groups[scope_key] = group
                group.add(policy, record)

        return list(groups.values())

    def classify(self, policies: Sequence[PolicyRef],
                 details_by_policy: Mapping[str, Optional[PolicyDetail]]) -> ConflictClassification:
        """
        Classify every setting of the comparison universe.

        Args:
            policies: Comparison universe, in order
            details_by_policy: Policy id -> detail payload (None when the fetch failed)

        Returns:
            Conflicts in discovery order and all settings, conflicts first
            then by display name
        """
        conflicts: List[SettingConflict] = []
        all_settings: List[SettingComparison] = []

        for group in self.group_settings(policies, details_by_policy):
            policy_values = [
                PolicyValue(
                    policy_id=policy.id,
                    policy_name=policy.name,
                    value=record.raw_value,
                    portal_url=get_portal_url(policy, self.portal_base_url)
                )
                for policy, record in group.entries
            ]
            is_conflict = self.is_conflict(group)
            first_record = group.entries[0][1]

            all_settings.append(SettingComparison(
                setting_name=first_record.friendly_name,
                setting_definition_id=group.scope_key.definition_id,
                platform=group.scope_key.platform,
                family_kind=group.scope_key.family_kind.value,
                is_conflict=is_conflict,
                policy_values=policy_values
            ))
            if is_conflict:
                conflicts.append(SettingConflict(
                    setting_name=first_record.friendly_name,
                    setting_definition_id=group.scope_key.definition_id,
                    platform=group.scope_key.platform,
                    family_kind=group.scope_key.family_kind.value,
                    source_policies=policy_values
                ))

        all_settings.sort(key=lambda comparison: (not comparison.is_conflict, comparison.setting_name.lower()))
        logger.info(f"Detected {len(conflicts)} setting conflicts across {len(all_settings)} settings "
                    f"from {len(policies)} policies")
        return ConflictClassification(conflicts=conflicts, all_settings=all_settings)

    def is_conflict(self, group: ComparisonGroup) -> bool:
        """True when two or more policies hold two or more distinct normalized values."""
        if group.policy_count < 2:
            return False
        normalized_values = {
            normalize(record.raw_value, self.treat_not_configured_as_disabled)
            for _, record in group.entries
        }
        return len(normalized_values) > 1


def classify(policies: Sequence[PolicyRef],
             details_by_policy: Mapping[str, Optional[PolicyDetail]]) -> ConflictClassification:
    """Classify settings with the default detector."""
    return ConflictDetector().classify(policies, details_by_policy)
