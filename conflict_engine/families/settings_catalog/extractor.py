"""
Setting extractor for declarative (settings catalog) policies.
"""
import logging
from typing import Any, Dict, List, Optional

from conflict_engine.config import settings
from conflict_engine.core.normalizers import render_scalar
from conflict_engine.families.abstract import CONFIGURED_SENTINEL, AbstractSettingExtractor
from conflict_engine.models.policies import FamilyKind, PolicyDetail, SettingRecord
from conflict_engine.utils.naming import humanize_choice_option, humanize_definition_id

logger = logging.getLogger(__name__)


class SettingsCatalogExtractor(AbstractSettingExtractor):
    """Extractor for catalog policies whose settings arrive as instance objects."""

    def __init__(self, family_kind: FamilyKind = FamilyKind.DECLARATIVE_CATALOG,
                 group_child_limit: Optional[int] = None):
        super().__init__(family_kind)
        self.group_child_limit = (
            group_child_limit if group_child_limit is not None else settings.GROUP_SUMMARY_CHILD_LIMIT
        )

    def extract(self, detail: PolicyDetail) -> List[SettingRecord]:
        """
        Extract setting records from a catalog policy detail.

        Args:
            detail: Payload with a "settings" list of setting objects

        Returns:
            One record per setting instance carrying a definition id
        """
        self.check_payload(detail)
        records = []
        for setting in self._entries(detail.get("settings")):
            record = self._to_record(setting)
            if record:
                records.append(record)
        return records

    def _entries(self, settings_value: Any) -> List[Any]:
        if isinstance(settings_value, list):
            return settings_value
        if settings_value is not None:
            logger.debug(f"Ignoring catalog settings of type {type(settings_value).__name__}")
        return []

    def _to_record(self, setting: Any) -> Optional[SettingRecord]:
        """Record for one setting object; None when it carries no usable definition id."""
        if not isinstance(setting, dict):
            logger.debug("Skipping catalog setting that is not an object")
            return None
        instance = setting.get("settingInstance")
        if not isinstance(instance, dict):
            logger.debug("Skipping catalog setting without a setting instance")
            return None
        definition_id = instance.get("settingDefinitionId")
        if not definition_id or not isinstance(definition_id, str):
            logger.debug("Skipping catalog setting without a definition id")
            return None

        try:
            value = self._render_instance(instance)
        except (AttributeError, KeyError, TypeError, ValueError) as e:
            logger.debug(f"Unexpected value shape for {definition_id}: {str(e)}")
            value = CONFIGURED_SENTINEL

        try:
            friendly_name = self._display_name(setting, definition_id)
        except (AttributeError, TypeError) as e:
            logger.debug(f"Unexpected definition metadata for {definition_id}: {str(e)}")
            friendly_name = humanize_definition_id(definition_id)

        return SettingRecord(definition_id=definition_id, friendly_name=friendly_name, raw_value=value)

    def _display_name(self, setting: Dict[str, Any], definition_id: str) -> str:
        """Pre-resolved display name when present, else derived from the definition id."""
        for key in ("_settingFriendlyName", "displayName"):
            if setting.get(key) and isinstance(setting[key], str):
                return setting[key]
        for definition in setting.get("settingDefinitions") or []:
            name = definition.get("displayName")
            if definition.get("id", definition_id) == definition_id and name and isinstance(name, str):
                return name
        return humanize_definition_id(definition_id)

    def _render_instance(self, instance: Dict[str, Any]) -> str:
        """Render whichever value slot of the instance is populated."""
        definition_id = instance.get("settingDefinitionId", "")

        choice = instance.get("choiceSettingValue")
        if choice is not None:
            return self._render_choice(choice.get("value"), definition_id)

        simple = instance.get("simpleSettingValue")
        if simple is not None:
            return render_scalar(simple.get("value", ""))

        choices = instance.get("choiceSettingCollectionValue")
        if choices:
            return ", ".join(self._render_choice(item.get("value"), definition_id) for item in choices)

        simples = instance.get("simpleSettingCollectionValue")
        if simples:
            return ", ".join(render_scalar(item.get("value", "")) for item in simples)

        groups = instance.get("groupSettingCollectionValue")
        if groups:
            return self._summarize_groups(groups)

        group = instance.get("groupSettingValue")
        if group:
            return self._summarize_groups([group])

        return CONFIGURED_SENTINEL

    def _render_choice(self, value: Optional[str], definition_id: str) -> str:
        """Render a choice value, e.g. "<definition id>_1" -> "Enabled"."""
        if not value:
            return CONFIGURED_SENTINEL
        if definition_id and value.startswith(definition_id + "_"):
            option = value[len(definition_id) + 1:]
        else:
            option = value.rsplit("~", 1)[-1]
            suffix = option.rsplit("_", 1)[-1]
            if suffix in ("0", "1"):
                option = suffix
        return humanize_choice_option(option)

    def _summarize_groups(self, groups: List[Dict[str, Any]]) -> str:
        """Summarize nested rule-groups by their first child settings."""
        children = [child for group in groups for child in (group.get("children") or [])]
        if not children:
            return CONFIGURED_SENTINEL

        parts = []
        for child in children[:self.group_child_limit]:
            child_id = child.get("settingDefinitionId", "")
            try:
                child_value = self._render_instance(child)
            except (AttributeError, KeyError, TypeError, ValueError):
                child_value = CONFIGURED_SENTINEL
            parts.append(f"{humanize_definition_id(child_id)}: {child_value}")

        summary = "; ".join(parts)
        remaining = len(children) - self.group_child_limit
        if remaining > 0:
            summary += f" (+{remaining} more)"
        return summary
