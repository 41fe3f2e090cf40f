"""
Custom exception classes for policy conflict analysis.
"""
from typing import List, Optional


class ConflictEngineError(Exception):
    """Base exception for policy conflict analysis errors."""

    def __init__(self, message: str, error_code: Optional[str] = None):
        self.message = message
        self.error_code = error_code
        super().__init__(self.message)


class ExtractionError(ConflictEngineError):
    """Exception raised when extracting settings from a policy detail fails."""

    def __init__(self, message: str, family_kind: Optional[str] = None):
        self.family_kind = family_kind
        super().__init__(message, "EXTRACTION_ERROR")


class UnsupportedFamilyError(ConflictEngineError):
    """Exception raised when no extractor is registered for a family."""

    def __init__(self, family_kind: str):
        self.family_kind = family_kind
        super().__init__(f"No extractor registered for family: {family_kind}", "UNSUPPORTED_FAMILY")


class PolicyStoreError(ConflictEngineError):
    """Exception raised by policy-store clients."""

    def __init__(self, message: str, policy_id: Optional[str] = None):
        self.policy_id = policy_id
        super().__init__(message, "POLICY_STORE_ERROR")


class PolicyNotFoundError(ConflictEngineError):
    """Exception raised when none of the selected policies exist."""

    def __init__(self, policy_ids: List[str]):
        self.policy_ids = policy_ids
        super().__init__(f"Selected policies not found: {', '.join(policy_ids)}", "POLICY_NOT_FOUND")


class AnalysisError(ConflictEngineError):
    """Exception raised when a conflict analysis cannot be run."""

    def __init__(self, message: str):
        super().__init__(message, "ANALYSIS_ERROR")
