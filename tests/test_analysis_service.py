"""
Unit tests for the conflict analysis service, assignment summaries and lookup caching.
"""
import asyncio
import unittest
from conflict_engine.core.assignments import summarize_assignments
from conflict_engine.exceptions import AnalysisError, PolicyNotFoundError, PolicyStoreError
from conflict_engine.models.policies import FamilyKind, PolicyRef
from conflict_engine.services.analysis_service import ConflictAnalysisService
from conflict_engine.services.lookup_cache import RequestLookupCache
from conflict_engine.services.policy_store import InMemoryPolicyStore


def catalog_detail(value, assignments=None):
    return {
        "settings": [{"settingInstance": {"settingDefinitionId": "fw.block",
                                          "simpleSettingValue": {"value": value}}}],
        "assignments": assignments or [],
    }


class CountingPolicyStore(InMemoryPolicyStore):
    """In-memory store that counts calls and can fail selected fetches."""

    def __init__(self, *args, failing_ids=(), **kwargs):
        super().__init__(*args, **kwargs)
        self.failing_ids = set(failing_ids)
        self.fetched = []
        self.group_calls = []
        self.filter_calls = []

    async def fetch_policy_detail(self, policy):
        self.fetched.append(policy.id)
        await asyncio.sleep(0)
        if policy.id in self.failing_ids:
            raise PolicyStoreError("Service unavailable", policy.id)
        return await super().fetch_policy_detail(policy)

    async def resolve_group(self, group_id):
        self.group_calls.append(group_id)
        await asyncio.sleep(0)
        return await super().resolve_group(group_id)

    async def resolve_filter(self, filter_id):
        self.filter_calls.append(filter_id)
        await asyncio.sleep(0)
        return await super().resolve_filter(filter_id)


class TestConflictAnalysisService(unittest.IsolatedAsyncioTestCase):
    """Test cases for ConflictAnalysisService class."""

    def setUp(self):
        """Set up test fixtures."""
        self.policies = [
            PolicyRef(id="a", name="A", platform="Windows", family_kind=FamilyKind.DECLARATIVE_CATALOG),
            PolicyRef(id="b", name="B", platform="Windows", family_kind=FamilyKind.DECLARATIVE_CATALOG),
            PolicyRef(id="m", name="M", platform="macOS", family_kind=FamilyKind.DECLARATIVE_CATALOG),
            PolicyRef(id="c", name="C", platform="Windows", family_kind=FamilyKind.DECLARATIVE_CATALOG),
        ]
        shared_group = {"target": {"@odata.type": "#microsoft.graph.groupAssignmentTarget", "groupId": "g1",
                                   "deviceAndAppManagementAssignmentFilterId": "f1",
                                   "deviceAndAppManagementAssignmentFilterType": "include"}}
        self.details = {
            "a": catalog_detail("true", [shared_group]),
            "b": catalog_detail("false", [shared_group]),
            "m": catalog_detail("false"),
            "c": catalog_detail("true"),
        }
        self.groups = {"g1": {"name": "Pilot devices", "type": "Dynamic Group", "memberCount": 12}}
        self.filters = {"f1": {"name": "Corporate", "rule": "(device.deviceOwnership -eq \"Corporate\")"}}

    async def test_related_policies_join_comparison(self):
        """Test that a related policy is fetched and compared but not selected."""
        # Arrange
        store = CountingPolicyStore(self.policies, self.details, self.groups, self.filters)
        service = ConflictAnalysisService(store)

        # Act
        report = await service.analyze(["a"])

        # Assert
        self.assertEqual(report.selected_policy_ids, ["a"])
        self.assertEqual(report.related_policy_ids, ["b", "c"])
        self.assertNotIn("m", store.fetched)
        self.assertEqual(len(report.setting_conflicts), 1)
        self.assertEqual([value.policy_id for value in report.setting_conflicts[0].source_policies],
                         ["a", "b", "c"])
        self.assertEqual(list(report.assignments.keys()), ["a"])

    async def test_related_policy_cap(self):
        """Test that the related policy cap bounds the fetch fan-out."""
        # Arrange
        store = CountingPolicyStore(self.policies, self.details)
        service = ConflictAnalysisService(store, related_policy_cap=0)

        # Act
        report = await service.analyze(["a"])

        # Assert
        self.assertEqual(report.related_policy_ids, [])
        self.assertEqual(store.fetched, ["a"])
        self.assertEqual(report.setting_conflicts, [])

    async def test_fetch_failure_isolated(self):
        """Test that one failing fetch does not fail the analysis."""
        # Arrange
        store = CountingPolicyStore(self.policies, self.details, self.groups, self.filters, failing_ids=["b"])
        service = ConflictAnalysisService(store)

        # Act
        report = await service.analyze(["a", "b"])

        # Assert
        self.assertEqual(report.setting_conflicts, [])
        self.assertEqual(len(report.all_settings), 1)
        self.assertEqual(report.assignments["b"].included, [])

    async def test_lookups_coalesced_per_request(self):
        """Test that a group and filter shared by two policies are looked up once."""
        # Arrange
        store = CountingPolicyStore(self.policies, self.details, self.groups, self.filters)
        service = ConflictAnalysisService(store)

        # Act
        report = await service.analyze(["a", "b"])

        # Assert
        self.assertEqual(store.group_calls, ["g1"])
        self.assertEqual(store.filter_calls, ["f1"])
        included = report.assignments["b"].included
        self.assertEqual(included[0].name, "Pilot devices")
        self.assertEqual(included[0].member_count, 12)
        self.assertEqual(report.assignments["a"].filters[0].mode, "Include")

    async def test_caches_not_shared_between_requests(self):
        """Test that each analysis builds its own lookup caches."""
        # Arrange
        store = CountingPolicyStore(self.policies, self.details, self.groups, self.filters)
        service = ConflictAnalysisService(store)

        # Act
        await asyncio.gather(service.analyze(["a"]), service.analyze(["b"]))

        # Assert
        self.assertEqual(store.group_calls, ["g1", "g1"])

    async def test_empty_selection_rejected(self):
        """Test that an empty selection raises AnalysisError."""
        service = ConflictAnalysisService(InMemoryPolicyStore(self.policies, self.details))
        with self.assertRaises(AnalysisError):
            await service.analyze([])

    async def test_unknown_selection_rejected(self):
        """Test that a selection with no known policies raises PolicyNotFoundError."""
        service = ConflictAnalysisService(InMemoryPolicyStore(self.policies, self.details))
        with self.assertRaises(PolicyNotFoundError) as context:
            await service.analyze(["zzz"])
        self.assertEqual(context.exception.error_code, "POLICY_NOT_FOUND")

    async def test_unknown_ids_ignored_alongside_known(self):
        """Test that unknown ids next to known ones are ignored."""
        service = ConflictAnalysisService(InMemoryPolicyStore(self.policies, self.details))
        report = await service.analyze(["a", "zzz"])
        self.assertEqual(report.selected_policy_ids, ["a"])


class TestAssignmentSummary(unittest.IsolatedAsyncioTestCase):
    """Test cases for summarize_assignments."""

    async def test_targets_resolved(self):
        """Test all-devices, exclusion and failed lookups."""
        # Arrange
        store = CountingPolicyStore([], {}, groups={"g1": {"name": "Sales", "type": "Entra ID Group",
                                                          "memberCount": 3}})
        lookups = RequestLookupCache(store)
        detail = {"assignments": [
            {"target": {"@odata.type": "#microsoft.graph.allDevicesAssignmentTarget"}},
            {"target": {"@odata.type": "#microsoft.graph.exclusionGroupAssignmentTarget", "groupId": "g1"}},
            {"target": {"@odata.type": "#microsoft.graph.groupAssignmentTarget", "groupId": "missing",
                        "deviceAndAppManagementAssignmentFilterId": "f9",
                        "deviceAndAppManagementAssignmentFilterType": "exclude"}},
            {"intent": "apply"},
        ]}

        # Act
        summary = await summarize_assignments(detail, lookups)

        # Assert
        self.assertEqual([group.name for group in summary.included], ["All Devices", "missing"])
        self.assertEqual(summary.included[1].member_count, 0)
        self.assertEqual([group.name for group in summary.excluded], ["Sales"])
        self.assertEqual(summary.filters[0].name, "f9")
        self.assertEqual(summary.filters[0].mode, "Exclude")

    async def test_missing_detail(self):
        """Test that a missing detail yields an empty summary."""
        lookups = RequestLookupCache(InMemoryPolicyStore([], {}))
        summary = await summarize_assignments(None, lookups)
        self.assertEqual((summary.included, summary.excluded, summary.filters), ([], [], []))


if __name__ == '__main__':
    unittest.main()
