"""
Factory and single dispatch point for family-specific setting extractors.
"""
import logging
from typing import Dict, List, Optional, Type

from conflict_engine.exceptions import UnsupportedFamilyError
from conflict_engine.families.abstract import AbstractSettingExtractor
from conflict_engine.families.attribute_bag.extractor import AttributeBagExtractor
from conflict_engine.families.security_template.extractor import SecurityTemplateExtractor
from conflict_engine.families.settings_catalog.extractor import SettingsCatalogExtractor
from conflict_engine.models.policies import FamilyKind, PolicyDetail, PolicyRef, SettingRecord

logger = logging.getLogger(__name__)


class ExtractorFactory:
    """Factory class for creating extractor instances."""

    # Registry of available extractors
    _extractors: Dict[FamilyKind, Type[AbstractSettingExtractor]] = {
        FamilyKind.DECLARATIVE_CATALOG: SettingsCatalogExtractor,
        FamilyKind.SECURITY_TEMPLATE: SecurityTemplateExtractor,
        FamilyKind.LEGACY_PROFILE: AttributeBagExtractor,
        FamilyKind.COMPLIANCE_RULE: AttributeBagExtractor,
    }

    @classmethod
    def register_extractor(cls, family_kind: FamilyKind, extractor_class: Type[AbstractSettingExtractor]):
        """
        Register an extractor for a family.

        Args:
            family_kind: The catalog family
            extractor_class: The extractor class
        """
        logger.info(f"Registering extractor for family: {family_kind.value}")
        cls._extractors[family_kind] = extractor_class

    @classmethod
    def create_extractor(cls, family_kind: FamilyKind) -> AbstractSettingExtractor:
        """
        Create an extractor instance for a family.

        Args:
            family_kind: The catalog family

        Returns:
            Extractor instance

        Raises:
            UnsupportedFamilyError: If no extractor is registered for the family
        """
        if family_kind not in cls._extractors:
            logger.error(f"Unsupported family: {family_kind}")
            raise UnsupportedFamilyError(str(family_kind))
        return cls._extractors[family_kind](family_kind)

    @classmethod
    def get_supported_families(cls) -> List[str]:
        """Get list of supported family kinds."""
        return [family_kind.value for family_kind in cls._extractors]


def extract_settings(policy: PolicyRef, detail: Optional[PolicyDetail]) -> List[SettingRecord]:
    """
    Extract a policy's settings, isolating any failure to that policy.

    Args:
        policy: Policy the detail belongs to
        detail: Fetched detail payload, None when the fetch failed

    Returns:
        The policy's setting records, empty when the detail is missing or unusable
    """
    if not detail:
        logger.warning(f"No detail available for policy \"{policy.name}\" ({policy.id})")
        return []

    try:
        extractor = ExtractorFactory.create_extractor(policy.family_kind)
        records = extractor.extract(detail)
    except Exception as e:
        logger.error(f"Failed to extract settings for policy \"{policy.name}\" ({policy.id}): {str(e)}")
        return []

    logger.debug(f"Extracted {len(records)} settings from {policy.family_kind.value} policy \"{policy.name}\"")
    return records
