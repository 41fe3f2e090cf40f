"""
Assignment scope summaries for policies.
"""
import logging
from typing import Any, Dict, Optional

from conflict_engine.models.policies import AssignmentFilter, AssignmentGroup, PolicyAssignments, PolicyDetail

logger = logging.getLogger(__name__)


async def summarize_assignments(detail: Optional[PolicyDetail], lookups) -> PolicyAssignments:
    """
    Resolve a policy's assignment targets into included/excluded groups and filters.

    Args:
        detail: Policy detail payload with an "assignments" list
        lookups: Object exposing async resolve_group(id) and resolve_filter(id)

    Returns:
        Assignment scope of the policy; empty when the detail is missing
    """
    summary = PolicyAssignments()
    if not detail:
        return summary

    for assignment in detail.get("assignments") or []:
        target = assignment.get("target")
        if not target:
            continue

        target_type = target.get("@odata.type") or ""
        group_id = target.get("groupId")

        if "allDevices" in target_type or "allLicensedUsers" in target_type:
            summary.included.append(AssignmentGroup(
                name="All Devices" if "allDevices" in target_type else "All Users",
                type="All devices/users",
                member_count=0
            ))
        elif group_id:
            group = _to_group(group_id, await lookups.resolve_group(group_id))
            if "exclusion" in target_type:
                summary.excluded.append(group)
            else:
                summary.included.append(group)

        filter_id = target.get("deviceAndAppManagementAssignmentFilterId")
        if filter_id:
            info = await lookups.resolve_filter(filter_id)
            summary.filters.append(AssignmentFilter(
                id=filter_id,
                name=info.get("name") or filter_id,
                rule=info.get("rule") or "",
                mode="Include" if target.get("deviceAndAppManagementAssignmentFilterType") == "include" else "Exclude"
            ))

    return summary


def _to_group(group_id: str, info: Dict[str, Any]) -> AssignmentGroup:
    return AssignmentGroup(
        id=group_id,
        name=info.get("name") or group_id,
        type=info.get("type") or "Entra ID Group",
        member_count=info.get("memberCount") or 0
    )
