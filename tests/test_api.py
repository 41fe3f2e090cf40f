"""
Tests for the conflict analysis HTTP endpoints.
"""
import unittest
from fastapi.testclient import TestClient
from main import app


def catalog_detail(value):
    return {"settings": [{"settingInstance": {"settingDefinitionId": "fw.block",
                                              "simpleSettingValue": {"value": value}}}]}


class TestConflictEndpoints(unittest.TestCase):
    """Test cases for the conflict analysis API."""

    def setUp(self):
        """Set up test fixtures."""
        self.client = TestClient(app)
        self.payload = {
            "selectedPolicyIds": ["a", "b"],
            "policies": [
                {"id": "a", "name": "A", "platform": "Windows", "familyKind": "declarative_catalog"},
                {"id": "b", "name": "B", "platform": "Windows", "familyKind": "declarative_catalog"},
            ],
            "details": {"a": catalog_detail("Enabled"), "b": catalog_detail("Block")},
        }

    def test_health(self):
        """Test the health endpoint."""
        response = self.client.get("/health")
        self.assertEqual(response.status_code, 200)
        self.assertEqual(response.json(), {"status": "healthy"})

    def test_get_supported_families(self):
        """Test listing supported families."""
        response = self.client.get("/api/v1/families")
        self.assertEqual(response.status_code, 200)
        self.assertIn("security_template", response.json()["families"])

    def test_analyze_conflicts(self):
        """Test a conflict analysis round trip with camelCase output."""
        # Act
        response = self.client.post("/api/v1/conflicts/analyze", json=self.payload)

        # Assert
        self.assertEqual(response.status_code, 200)
        body = response.json()
        self.assertEqual(len(body["settingConflicts"]), 1)
        conflict = body["settingConflicts"][0]
        self.assertEqual(conflict["settingDefinitionId"], "fw.block")
        self.assertEqual([value["policyName"] for value in conflict["sourcePolicies"]], ["A", "B"])
        self.assertTrue(body["allSettings"][0]["isConflict"])
        self.assertIn("portalUrl", conflict["sourcePolicies"][0])

    def test_null_detail_tolerated(self):
        """Test that a null detail is treated as no settings."""
        # Arrange
        self.payload["details"]["b"] = None

        # Act
        response = self.client.post("/api/v1/conflicts/analyze", json=self.payload)

        # Assert
        self.assertEqual(response.status_code, 200)
        self.assertEqual(response.json()["settingConflicts"], [])

    def test_empty_selection_returns_400(self):
        """Test that an empty selection is rejected."""
        self.payload["selectedPolicyIds"] = []
        response = self.client.post("/api/v1/conflicts/analyze", json=self.payload)
        self.assertEqual(response.status_code, 400)

    def test_unknown_selection_returns_404(self):
        """Test that unknown policy ids are reported as not found."""
        self.payload["selectedPolicyIds"] = ["zzz"]
        response = self.client.post("/api/v1/conflicts/analyze", json=self.payload)
        self.assertEqual(response.status_code, 404)


if __name__ == '__main__':
    unittest.main()
