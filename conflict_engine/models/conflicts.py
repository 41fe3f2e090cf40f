"""
Setting comparison and conflict models.
"""
from dataclasses import dataclass, field
from datetime import datetime
from typing import Dict, List, Tuple

from pydantic import Field

from conflict_engine.models.policies import CamelModel, PolicyAssignments, PolicyRef, ScopeKey, SettingRecord


class PolicyValue(CamelModel):
    """Value one policy assigns to a setting, with a link to the policy in the console."""
    policy_id: str
    policy_name: str
    value: str
    portal_url: str


class SettingComparison(CamelModel):
    """One row per distinct (platform, family, definition id)."""
    setting_name: str
    setting_definition_id: str
    platform: str
    family_kind: str
    is_conflict: bool
    policy_values: List[PolicyValue] = Field(default_factory=list)


class SettingConflict(CamelModel):
    """A setting configured to different values by two or more policies."""
    setting_name: str
    setting_definition_id: str
    platform: str
    family_kind: str
    source_policies: List[PolicyValue] = Field(default_factory=list)


class ConflictClassification(CamelModel):
    """Result of classifying a comparison universe."""
    conflicts: List[SettingConflict] = Field(default_factory=list)
    all_settings: List[SettingComparison] = Field(default_factory=list)


class ConflictAnalysisReport(CamelModel):
    """Complete setting conflict analysis for one request."""
    analysis_id: str
    generated_at: datetime
    selected_policy_ids: List[str]
    related_policy_ids: List[str]
    setting_conflicts: List[SettingConflict]
    all_settings: List[SettingComparison]
    assignments: Dict[str, PolicyAssignments] = Field(default_factory=dict)


@dataclass
class ComparisonGroup:
    """Records sharing a scope key, at most one per policy (first occurrence wins)."""
    scope_key: ScopeKey
    entries: List[Tuple[PolicyRef, SettingRecord]] = field(default_factory=list)
    _policy_ids: set = field(default_factory=set, init=False, repr=False)

    def add(self, policy: PolicyRef, record: SettingRecord) -> bool:
        """Add a policy's record; return False if the policy already contributed."""
        if policy.id in self._policy_ids:
            return False
        self._policy_ids.add(policy.id)
        self.entries.append((policy, record))
        return True

    @property
    def policy_count(self) -> int:
        return len(self._policy_ids)
