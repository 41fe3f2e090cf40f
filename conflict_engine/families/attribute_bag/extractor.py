"""
Setting extractor for attribute-bag policies (legacy profiles, compliance rules).
"""
import logging
from typing import Any, Dict, List, Optional

from conflict_engine.config import settings
from conflict_engine.core.normalizers import render_scalar
from conflict_engine.families.abstract import CONFIGURED_SENTINEL, AbstractSettingExtractor
from conflict_engine.models.policies import FamilyKind, PolicyDetail, SettingRecord
from conflict_engine.utils.naming import humanize_path

logger = logging.getLogger(__name__)

# Bookkeeping fields that never describe a setting
SKIPPED_FIELDS = frozenset({
    "id",
    "displayName",
    "description",
    "createdDateTime",
    "lastModifiedDateTime",
    "version",
    "roleScopeTagIds",
    "@odata.type",
    "assignments",
    "settings",
    "settingsCount",
    "isAssigned",
    "supportsScopeTags",
    "scheduledActionsForRule",
    "deviceManagementApplicabilityRuleOsEdition",
    "deviceManagementApplicabilityRuleOsVersion",
    "deviceManagementApplicabilityRuleDeviceMode",
    "omaSettings",
})

# Data type suffixes of URI-keyed setting entries
OMA_DATA_TYPES = [
    ("Integer", "Integer"),
    ("Boolean", "Boolean"),
    ("Base64", "Base64"),
    ("Xml", "XML"),
    ("DateTime", "DateTime"),
    ("FloatingPoint", "Float"),
]


class AttributeBagExtractor(AbstractSettingExtractor):
    """
    Extractor for policies that carry settings as plain object properties.

    The definition id of each record is "{family}/{dotted.path}", so two
    policies of the same family line up on the same logical field.
    """

    def __init__(self, family_kind: FamilyKind = FamilyKind.LEGACY_PROFILE, max_depth: Optional[int] = None):
        super().__init__(family_kind)
        self.max_depth = max_depth if max_depth is not None else settings.ATTRIBUTE_WALK_MAX_DEPTH

    def extract(self, detail: PolicyDetail) -> List[SettingRecord]:
        """
        Extract setting records from an attribute-bag payload.

        A non-empty URI-keyed "omaSettings" list is authoritative and is
        used instead of walking the object's properties; entries without a
        URI have no identity to compare on and are skipped.

        Args:
            detail: Policy object payload

        Returns:
            One record per leaf scalar or scalar array
        """
        self.check_payload(detail)
        oma_settings = detail.get("omaSettings")
        if isinstance(oma_settings, list) and oma_settings:
            oma_records = []
            for entry in oma_settings:
                if not isinstance(entry, dict) or not isinstance(entry.get("omaUri"), str) or not entry["omaUri"]:
                    logger.debug("Skipping URI-keyed setting without a URI")
                    continue
                oma_records.append(self._oma_record(entry))
            return oma_records

        records: List[SettingRecord] = []
        self._walk(detail, "", 0, records)
        return records

    def _walk(self, obj: Dict[str, Any], prefix: str, depth: int, records: List[SettingRecord]):
        if depth > self.max_depth:
            return

        for key, value in obj.items():
            if key in SKIPPED_FIELDS or key.startswith("@") or key.startswith("_"):
                continue
            if value is None:
                continue

            path = f"{prefix}.{key}" if prefix else key
            if isinstance(value, list):
                if value and isinstance(value[0], dict):
                    for index, item in enumerate(value):
                        if isinstance(item, dict):
                            self._walk(item, f"{path}[{index}]", depth + 1, records)
                else:
                    records.append(self._record(path, ", ".join(self._render_leaf(item) for item in value)))
            elif isinstance(value, dict):
                self._walk(value, path, depth + 1, records)
            else:
                records.append(self._record(path, self._render_leaf(value)))

    def _render_leaf(self, value: Any) -> str:
        if isinstance(value, (dict, list)):
            return CONFIGURED_SENTINEL
        return render_scalar(value)

    def _record(self, path: str, value: str) -> SettingRecord:
        return SettingRecord(
            definition_id=f"{self.family_kind.value}/{path}",
            friendly_name=humanize_path(path),
            raw_value=value
        )

    def _oma_record(self, entry: Dict[str, Any]) -> SettingRecord:
        """Record for one URI-keyed setting entry."""
        oma_type = entry.get("@odata.type")
        if not isinstance(oma_type, str):
            oma_type = ""
        name = entry.get("displayName") or oma_type or "OMA-URI Setting"

        data_type = "String"
        for marker, label in OMA_DATA_TYPES:
            if marker in oma_type:
                data_type = label
                break

        if entry.get("value") is not None:
            value = render_scalar(entry["value"])
        elif entry.get("fileName"):
            value = f"File: {entry['fileName']}"
        else:
            value = CONFIGURED_SENTINEL

        return SettingRecord(
            definition_id=f"omaUri:{entry['omaUri']}",
            friendly_name=f"{name} ({data_type})",
            raw_value=value
        )
