"""
API endpoints for setting conflict analysis.
"""
import logging
from typing import Any, Dict, List, Optional

from fastapi import APIRouter, HTTPException
from pydantic import Field

from conflict_engine.config import settings
from conflict_engine.exceptions import AnalysisError, ConflictEngineError, PolicyNotFoundError
from conflict_engine.families.factory import ExtractorFactory
from conflict_engine.models.conflicts import ConflictAnalysisReport
from conflict_engine.models.policies import CamelModel, PolicyRef
from conflict_engine.services.analysis_service import ConflictAnalysisService
from conflict_engine.services.policy_store import InMemoryPolicyStore

# Set up logging
logger = logging.getLogger(__name__)

router = APIRouter(prefix=settings.API_V1_STR)


class AnalyzeConflictsRequest(CamelModel):
    """Request model for a setting conflict analysis."""
    selected_policy_ids: List[str]
    policies: List[PolicyRef]
    details: Dict[str, Optional[Dict[str, Any]]] = Field(default_factory=dict)
    groups: Dict[str, Dict[str, Any]] = Field(default_factory=dict)
    filters: Dict[str, Dict[str, Any]] = Field(default_factory=dict)
    related_policy_cap: Optional[int] = Field(default=None, ge=0)


@router.get("/families")
async def get_supported_families() -> Dict[str, List[str]]:
    """Get list of supported policy catalog families."""
    return {"families": ExtractorFactory.get_supported_families()}


@router.post("/conflicts/analyze", response_model=ConflictAnalysisReport, response_model_by_alias=True)
async def analyze_conflicts(request: AnalyzeConflictsRequest) -> ConflictAnalysisReport:
    """
    Detect setting-level conflicts between the selected policies.

    Related policies of the same platform and family are pulled from the
    supplied listing to widen the comparison.

    Args:
        request: Selection, policy listing, detail payloads and lookups

    Returns:
        Conflict analysis report
    """
    logger.info(f"Starting conflict analysis for {len(request.selected_policy_ids)} selected policies")
    store = InMemoryPolicyStore(request.policies, request.details, request.groups, request.filters)
    service = ConflictAnalysisService(store, related_policy_cap=request.related_policy_cap)

    try:
        report = await service.analyze(request.selected_policy_ids)
    except AnalysisError as e:
        logger.warning(f"Rejected conflict analysis: {e.message}")
        raise HTTPException(status_code=400, detail=e.message)
    except PolicyNotFoundError as e:
        logger.warning(f"Rejected conflict analysis: {e.message}")
        raise HTTPException(status_code=404, detail="Selected policies not found. Try refreshing the policy list.")
    except ConflictEngineError as e:
        logger.error(f"Conflict analysis failed: {e.message}")
        raise HTTPException(status_code=500, detail="Analysis failed")

    logger.info(f"Conflict analysis {report.analysis_id} found {len(report.setting_conflicts)} conflicts")
    return report
