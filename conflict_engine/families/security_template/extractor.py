"""
Setting extractor for security-template (endpoint security intent) policies.
"""
import json
import logging
from typing import Any, Dict, List, Optional

from conflict_engine.core.normalizers import render_scalar
from conflict_engine.families.abstract import CONFIGURED_SENTINEL, AbstractSettingExtractor
from conflict_engine.models.policies import FamilyKind, PolicyDetail, SettingRecord
from conflict_engine.utils.naming import humanize_template_setting

logger = logging.getLogger(__name__)


class SecurityTemplateExtractor(AbstractSettingExtractor):
    """Extractor for template policies whose settings are grouped by category."""

    def __init__(self, family_kind: FamilyKind = FamilyKind.SECURITY_TEMPLATE):
        super().__init__(family_kind)

    def extract(self, detail: PolicyDetail) -> List[SettingRecord]:
        """
        Flatten categorized template settings into one list.

        Args:
            detail: Payload with "categories" (each with "settings"), or a
                flat "settings" list when the template has no categories

        Returns:
            Setting records, category kept as context
        """
        self.check_payload(detail)
        records = []
        for category in self._entries(detail.get("categories")):
            if not isinstance(category, dict):
                logger.debug("Skipping template category that is not an object")
                continue
            category_name = category.get("displayName") or category.get("id")
            if not isinstance(category_name, str):
                category_name = None
            for setting in self._entries(category.get("settings")):
                record = self._to_record(setting, category_name)
                if record:
                    records.append(record)

        if not records:
            for setting in self._entries(detail.get("settings")):
                record = self._to_record(setting, None)
                if record:
                    records.append(record)
        return records

    def _entries(self, value: Any) -> List[Any]:
        return value if isinstance(value, list) else []

    def _to_record(self, setting: Any, category: Optional[str]) -> Optional[SettingRecord]:
        if not isinstance(setting, dict):
            logger.debug("Skipping template setting that is not an object")
            return None
        definition_id = setting.get("definitionId") or setting.get("id") or ""
        if not definition_id or not isinstance(definition_id, str):
            logger.debug("Skipping template setting without a definition id")
            return None

        try:
            value = self._render_value(setting)
        except (TypeError, ValueError) as e:
            logger.debug(f"Unexpected value shape for {definition_id}: {str(e)}")
            value = CONFIGURED_SENTINEL

        display_name = setting.get("displayName")
        if not display_name or not isinstance(display_name, str):
            display_name = humanize_template_setting(definition_id)

        return SettingRecord(
            definition_id=definition_id,
            friendly_name=display_name,
            raw_value=value,
            category=category
        )

    def _render_value(self, setting: Dict[str, Any]) -> str:
        """Direct value, else the decoded JSON value, else the sentinel."""
        if setting.get("value") is not None:
            return render_scalar(setting["value"])

        value_json = setting.get("valueJson")
        if value_json:
            try:
                parsed = json.loads(value_json)
            except json.JSONDecodeError:
                return value_json
            if isinstance(parsed, (dict, list)):
                return json.dumps(parsed, separators=(",", ":"))
            if parsed is None:
                return CONFIGURED_SENTINEL
            return render_scalar(parsed)

        return CONFIGURED_SENTINEL
