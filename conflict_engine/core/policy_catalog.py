"""
Classification of raw policy listing items into policy references.
"""
import logging
from typing import Any, Dict, Iterable, List, Optional, Tuple

from conflict_engine.models.policies import FamilyKind, PolicyRef

logger = logging.getLogger(__name__)

# Listing collection -> catalog family
FAMILY_BY_SOURCE: Dict[str, FamilyKind] = {
    "configurationPolicies": FamilyKind.DECLARATIVE_CATALOG,
    "deviceConfigurations": FamilyKind.LEGACY_PROFILE,
    "deviceCompliancePolicies": FamilyKind.COMPLIANCE_RULE,
    "intents": FamilyKind.SECURITY_TEMPLATE,
}

UNKNOWN_PLATFORM = "Unknown"

# Ordered (marker, platform) pairs checked against lower-cased text
PLATFORM_MARKERS: List[Tuple[str, str]] = [
    ("windows", "Windows"),
    ("ios", "iOS/iPadOS"),
    ("macos", "macOS"),
    ("android", "Android Enterprise"),
    ("linux", "Linux"),
]

ODATA_PLATFORM_MARKERS: List[Tuple[Tuple[str, ...], str]] = [
    (("windows", "win32", "edgehomebutton", "sharedpc"), "Windows"),
    (("ios", "iphone", "ipad"), "iOS/iPadOS"),
    (("macos", "osx"), "macOS"),
    (("android",), "Android Enterprise"),
]

NAME_PLATFORM_MARKERS: List[Tuple[Tuple[str, ...], str]] = [
    (("windows", "win10", "win11"), "Windows"),
    (("ios", "iphone", "ipad"), "iOS/iPadOS"),
    (("macos",), "macOS"),
    (("android",), "Android Enterprise"),
    (("linux",), "Linux"),
]

TEMPLATE_PLATFORM_MARKERS: List[Tuple[Tuple[str, ...], str]] = [
    (("windows", "defender", "bitlocker", "firewall"), "Windows"),
    (("ios", "iphone"), "iOS/iPadOS"),
    (("macos",), "macOS"),
    (("android",), "Android Enterprise"),
    (("linux",), "Linux"),
]


def _match(text: str, markers: List[Tuple[Tuple[str, ...], str]]) -> Optional[str]:
    for needles, platform in markers:
        if any(needle in text for needle in needles):
            return platform
    return None


def infer_platform(item: Dict[str, Any], source: str) -> str:
    """
    Infer a policy's platform from its listing item.

    Checked in order: declared platforms, OData type, template display name,
    policy name. Security templates with a template id default to Windows.
    """
    platforms = str(item.get("platforms") or "").lower()
    for marker, platform in PLATFORM_MARKERS:
        if marker in platforms:
            return platform

    odata_type = str(item.get("@odata.type") or "").lower()
    platform = _match(odata_type, ODATA_PLATFORM_MARKERS)
    if platform:
        return platform

    template = item.get("templateReference") or {}
    if template.get("templateId") or item.get("templateId"):
        platform = _match(str(template.get("templateDisplayName") or "").lower(), TEMPLATE_PLATFORM_MARKERS)
        if platform:
            return platform

    name = str(item.get("displayName") or item.get("name") or "").lower()
    platform = _match(name, NAME_PLATFORM_MARKERS)
    if platform:
        return platform

    if source == "intents" and item.get("templateId"):
        return "Windows"
    return UNKNOWN_PLATFORM


def to_policy_ref(item: Dict[str, Any], source: str) -> Optional[PolicyRef]:
    """
    Build a policy reference from a raw listing item.

    Args:
        item: Raw listing item
        source: Listing collection the item came from

    Returns:
        PolicyRef, or None for unsupported collections or items without an id
    """
    family_kind = FAMILY_BY_SOURCE.get(source)
    if family_kind is None:
        logger.warning(f"Skipping policy from unsupported source: {source}")
        return None
    if not item.get("id"):
        logger.warning(f"Skipping {source} listing item without an id")
        return None

    template = item.get("templateReference") or {}
    return PolicyRef(
        id=str(item["id"]),
        name=item.get("displayName") or item.get("name") or "Unnamed Policy",
        platform=infer_platform(item, source),
        family_kind=family_kind,
        odata_type=item.get("@odata.type"),
        template_id=template.get("templateId") or item.get("templateId")
    )


def build_catalog(listing: Iterable[Tuple[str, Dict[str, Any]]]) -> List[PolicyRef]:
    """Policy references for (source, item) pairs, in listing order."""
    policies = []
    for source, item in listing:
        policy = to_policy_ref(item, source)
        if policy:
            policies.append(policy)
    logger.info(f"Catalogued {len(policies)} policies")
    return policies
