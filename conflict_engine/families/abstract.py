"""
Abstract base class for family-specific setting extractors.
"""
import logging
from abc import ABC, abstractmethod
from typing import List

from conflict_engine.exceptions import ExtractionError
from conflict_engine.models.policies import FamilyKind, PolicyDetail, SettingRecord

logger = logging.getLogger(__name__)

# Sentinel used when a setting is present but its value cannot be rendered
CONFIGURED_SENTINEL = "Configured"


class AbstractSettingExtractor(ABC):
    """Flattens one family's policy detail payload into setting records."""

    def __init__(self, family_kind: FamilyKind):
        self.family_kind = family_kind

    @abstractmethod
    def extract(self, detail: PolicyDetail) -> List[SettingRecord]:
        """
        Extract the configured settings of a policy.

        Args:
            detail: Policy detail payload for this extractor's family

        Returns:
            One record per configured setting
        """
        pass

    def check_payload(self, detail: PolicyDetail):
        """Raise ExtractionError unless the detail is a JSON object."""
        if not isinstance(detail, dict):
            raise ExtractionError(
                f"Expected an object payload, got {type(detail).__name__}",
                self.family_kind.value
            )
