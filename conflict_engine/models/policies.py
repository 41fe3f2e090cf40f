"""
Data models for policies, their catalog families and extracted settings.
"""
from enum import Enum
from typing import Any, Dict, List, Optional

from pydantic import BaseModel, ConfigDict, Field
from pydantic.alias_generators import to_camel


class FamilyKind(str, Enum):
    """Catalog mechanism a policy belongs to. Families are never compared against each other."""
    DECLARATIVE_CATALOG = "declarative_catalog"
    LEGACY_PROFILE = "legacy_profile"
    COMPLIANCE_RULE = "compliance_rule"
    SECURITY_TEMPLATE = "security_template"


class CamelModel(BaseModel):
    """Base model serialized with camelCase keys."""
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)


class PolicyRef(CamelModel):
    """A policy as known from the policy listing."""
    id: str
    name: str
    platform: str
    family_kind: FamilyKind
    odata_type: Optional[str] = None  # used for deep links only
    template_id: Optional[str] = None  # used for deep links only


class SettingRecord(CamelModel):
    """One configured setting of one policy."""
    definition_id: str
    friendly_name: str
    raw_value: str
    category: Optional[str] = None  # security-template category, display only


class ScopeKey(BaseModel):
    """Comparison bucket: records are compared only within the same key."""
    model_config = ConfigDict(frozen=True)

    platform: str
    family_kind: FamilyKind
    definition_id: str


class AssignmentGroup(CamelModel):
    """A resolved group targeted by a policy assignment."""
    id: Optional[str] = None
    name: str
    type: str
    member_count: int = 0


class AssignmentFilter(CamelModel):
    """A resolved assignment filter."""
    id: Optional[str] = None
    name: str
    rule: str = ""
    mode: str  # Include, Exclude


class PolicyAssignments(CamelModel):
    """Assignment scope of a single policy."""
    included: List[AssignmentGroup] = Field(default_factory=list)
    excluded: List[AssignmentGroup] = Field(default_factory=list)
    filters: List[AssignmentFilter] = Field(default_factory=list)


# Raw per-family detail payload as returned by the policy-detail client
PolicyDetail = Dict[str, Any]
