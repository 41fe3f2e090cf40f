"""
Deep links into the management console's policy detail views.

Blade layouts:
1. PolicySummaryBlade       -> declarative catalog, security templates
2. PolicySummaryReportBlade -> legacy profiles, compliance rules
3. DevicesMenu              -> generic overview for anything else
"""
import re
from typing import Dict, Optional
from urllib.parse import quote

from conflict_engine.config import settings
from conflict_engine.models.policies import FamilyKind, PolicyRef

# OData type -> policyType number of the summary report blade
PROFILE_POLICY_TYPES: Dict[str, int] = {
    # Windows
    "windows10customconfiguration": 74,
    "windows10generalconfiguration": 79,
    "windows10endpointprotectionconfiguration": 77,
    "windowsidentityprotectionconfiguration": 78,
    "windowsgrouppolicyconfiguration": 71,
    "windows10teamgeneralconfiguration": 79,
    "sharedpcconfiguration": 79,
    "windowsdefenderadvancedthreatprotectionconfiguration": 77,
    "windows10vpnconfiguration": 74,
    "windowswificonfiguration": 74,
    "windowswifienterpriseeapconfiguration": 74,
    "windows10importedpfxcertificateprofile": 74,
    "windows10trustedcertificateprofile": 74,
    "windowsupdateforbusinessconfiguration": 74,
    "editionupgradeconfiguration": 74,
    "windowshealthmonitoringconfiguration": 74,
    "windowskioskconfiguration": 74,
    "windowsdomainjoinconfiguration": 74,
    "windowsdeliveryoptimizationconfiguration": 74,
    # iOS/iPadOS
    "iosgeneraldeviceconfiguration": 54,
    "ioscustomconfiguration": 54,
    "iosdevicefeaturesconfiguration": 54,
    "iosvpnconfiguration": 54,
    "ioswificonfiguration": 54,
    "iosenterprisewificonfiguration": 54,
    "ioscertificateprofile": 54,
    "iostrustedcertificateprofile": 54,
    "iosscepcertificateprofile": 54,
    "iospkcscertificateprofile": 54,
    "iosupdateconfiguration": 54,
    # Android
    "androidgeneraldeviceconfiguration": 13,
    "androidcustomconfiguration": 13,
    "androiddeviceownergeneraldeviceconfiguration": 13,
    "androidworkprofilegeneraldeviceconfiguration": 13,
    "androiddeviceownerenterprisewideconfiguration": 13,
    "androidworkprofilecustomconfiguration": 13,
    "androiddeviceownercertificateprofile": 13,
    "androidworkprofilevpnconfiguration": 13,
    "androidworkprofilewificonfiguration": 13,
    "androiddeviceownervpnconfiguration": 13,
    "androiddeviceownerwificonfiguration": 13,
    "androiddeviceownertrustedcertificateprofile": 13,
    "androidforworkcustomconfiguration": 13,
    "androidforworkgeneraldeviceconfiguration": 13,
    # macOS
    "macosgeneraldeviceconfiguration": 5,
    "macoscustomconfiguration": 5,
    "macosdevicefeaturesconfiguration": 5,
    "macosvpnconfiguration": 5,
    "macoswificonfiguration": 5,
    "macosenterprisewificonfiguration": 5,
    "macossoftwareupdateconfiguration": 5,
    "macoscertificateprofile": 5,
    "macosendpointprotectionconfiguration": 5,
    "macosextensionsconfiguration": 5,
    "macoscustomappconfiguration": 5,
}

PROFILE_PLATFORM_FALLBACK: Dict[str, int] = {
    "Windows": 74,
    "iOS/iPadOS": 54,
    "iOS": 54,
    "Android Enterprise": 13,
    "Android": 13,
    "macOS": 5,
    "Linux": 74,
}

COMPLIANCE_POLICY_TYPES: Dict[str, int] = {
    "windows10compliancepolicy": 6,
    "ioscompliancepolicy": 31,
    "androidcompliancepolicy": 10,
    "androiddeviceownercompliancepolicy": 10,
    "androidworkprofilecompliancepolicy": 10,
    "macoscompliancepolicy": 9,
    "defaultdevicecompliancepolicy": 6,
}

COMPLIANCE_PLATFORM_FALLBACK: Dict[str, int] = {
    "Windows": 6,
    "iOS/iPadOS": 31,
    "iOS": 31,
    "Android Enterprise": 10,
    "Android": 10,
    "macOS": 9,
}

PLATFORM_URL_NAMES: Dict[str, str] = {
    "Windows": "windows10",
    "iOS/iPadOS": "iOS",
    "iOS": "iOS",
    "Android Enterprise": "android",
    "Android": "android",
    "macOS": "macOS",
    "Linux": "linux",
}


def _clean_odata_type(odata_type: Optional[str]) -> str:
    cleaned = (odata_type or "").replace("#microsoft.graph.", "").lower()
    return re.sub(r"[^a-z0-9]", "", cleaned)


def _resolve_policy_type(odata_type: Optional[str], platform: str,
                         table: Dict[str, int], fallback: Dict[str, int], default: int) -> int:
    cleaned = _clean_odata_type(odata_type)
    if cleaned in table:
        return table[cleaned]
    return fallback.get(platform, default)


def get_portal_url(policy: PolicyRef, base_url: Optional[str] = None) -> str:
    """
    Deep link to a policy's detail view in the management console.

    Args:
        policy: Policy to link to
        base_url: Console host; defaults to the PORTAL_BASE_URL setting

    Returns:
        Absolute URL; the generic configuration overview for unknown families
    """
    base = (base_url or settings.PORTAL_BASE_URL).rstrip("/")
    platform_name = PLATFORM_URL_NAMES.get(policy.platform, "windows10")
    encoded_name = quote(policy.name or "", safe="")

    if policy.family_kind == FamilyKind.DECLARATIVE_CATALOG:
        return (f"{base}/#view/Microsoft_Intune_Workflows/PolicySummaryBlade/policyId/{policy.id}"
                f"/isAssigned~/true/technology/mdm/templateId//platformName/{platform_name}")

    if policy.family_kind == FamilyKind.SECURITY_TEMPLATE:
        template_suffix = f"{policy.template_id}_1" if policy.template_id else ""
        return (f"{base}/#view/Microsoft_Intune_Workflows/PolicySummaryBlade/policyId/{policy.id}"
                f"/isAssigned~/true/technology/mdm/templateId/{template_suffix}/platformName/{platform_name}")

    if policy.family_kind == FamilyKind.LEGACY_PROFILE:
        policy_type = _resolve_policy_type(policy.odata_type, policy.platform,
                                           PROFILE_POLICY_TYPES, PROFILE_PLATFORM_FALLBACK, 74)
    elif policy.family_kind == FamilyKind.COMPLIANCE_RULE:
        policy_type = _resolve_policy_type(policy.odata_type, policy.platform,
                                           COMPLIANCE_POLICY_TYPES, COMPLIANCE_PLATFORM_FALLBACK, 6)
    else:
        return f"{base}/#view/Microsoft_Intune_DeviceSettings/DevicesMenu/~/configuration"

    return (f"{base}/#view/Microsoft_Intune_DeviceSettings/PolicySummaryReportBlade/policyId/{policy.id}"
            f"/policyName/{encoded_name}/policyJourneyState~/0/policyType~/{policy_type}/isAssigned~/true")
