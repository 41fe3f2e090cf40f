"""
Unit tests for comparison scope expansion.
"""
import unittest
from conflict_engine.core.scope_resolver import ScopeResolver
from conflict_engine.models.policies import FamilyKind, PolicyRef


def policy(policy_id, platform="Windows", family_kind=FamilyKind.DECLARATIVE_CATALOG):
    return PolicyRef(id=policy_id, name=policy_id, platform=platform, family_kind=family_kind)


class TestScopeResolver(unittest.TestCase):
    """Test cases for ScopeResolver class."""

    def setUp(self):
        """Set up test fixtures."""
        self.resolver = ScopeResolver(cap=20)
        self.selected = policy("s1")
        self.all_known = [
            policy("r1"),
            self.selected,
            policy("mac", platform="macOS"),
            policy("tpl", family_kind=FamilyKind.SECURITY_TEMPLATE),
            policy("r2"),
        ]

    def test_same_platform_and_family_only(self):
        """Test that only policies sharing platform and family are related."""
        # Act
        related = self.resolver.expand([self.selected], self.all_known)

        # Assert
        self.assertEqual([p.id for p in related], ["r1", "r2"])

    def test_selected_policies_excluded(self):
        """Test that selected policies are never returned as related."""
        related = self.resolver.expand([self.selected, self.all_known[0]], self.all_known)
        self.assertEqual([p.id for p in related], ["r2"])

    def test_union_of_selected_scopes(self):
        """Test that each selected policy contributes its own scope."""
        # Arrange
        selected = [self.selected, policy("mac-selected", platform="macOS")]

        # Act
        related = self.resolver.expand(selected, self.all_known)

        # Assert
        self.assertEqual([p.id for p in related], ["r1", "mac", "r2"])

    def test_cap_keeps_listing_order(self):
        """Test that truncation keeps the first candidates in listing order."""
        # Arrange
        all_known = [policy(f"r{index}") for index in range(30)] + [self.selected]

        # Act
        related = self.resolver.expand([self.selected], all_known, cap=5)

        # Assert
        self.assertEqual([p.id for p in related], ["r0", "r1", "r2", "r3", "r4"])
        self.assertEqual(related, self.resolver.expand([self.selected], all_known, cap=5))

    def test_default_cap(self):
        """Test that the resolver cap bounds the result."""
        # Arrange
        all_known = [policy(f"r{index}") for index in range(30)]

        # Act
        related = self.resolver.expand([self.selected], all_known)

        # Assert
        self.assertEqual(len(related), 20)

    def test_no_selection(self):
        """Test that an empty selection relates nothing."""
        self.assertEqual(self.resolver.expand([], self.all_known), [])


if __name__ == '__main__':
    unittest.main()
