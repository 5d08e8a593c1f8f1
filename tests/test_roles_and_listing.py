"""Unit tests for role policies and the listing helpers (sort fallback, page math)."""

import api_support  # noqa: F401  (test settings must load before rately)

import unittest

from rately.api.deps import require_policy
from rately.core.roles import POLICIES, Role, is_allowed
from rately.models import User
from rately.services.listing import PageRequest, PageResult, resolve_sort


class TestPolicies(unittest.TestCase):
    def test_admin_policy_only_admits_admin(self) -> None:
        self.assertTrue(is_allowed("admin", Role.SYSTEM_ADMIN))
        self.assertFalse(is_allowed("admin", Role.NORMAL_USER))
        self.assertFalse(is_allowed("admin", Role.STORE_OWNER))

    def test_each_role_passes_only_its_own_policy(self) -> None:
        self.assertEqual(set(POLICIES), {"admin", "normal_user", "store_owner"})
        owners = {"admin": Role.SYSTEM_ADMIN, "normal_user": Role.NORMAL_USER, "store_owner": Role.STORE_OWNER}
        for policy, owner in owners.items():
            for role in Role:
                self.assertEqual(is_allowed(policy, role), role is owner, (policy, role))

    def test_role_strings_accepted(self) -> None:
        self.assertTrue(is_allowed("normal_user", "normal_user"))
        self.assertFalse(is_allowed("normal_user", "superuser"))

    def test_every_policy_names_known_roles(self) -> None:
        for roles in POLICIES.values():
            self.assertTrue(roles)
            self.assertTrue(all(isinstance(r, Role) for r in roles))

    def test_unknown_policy_rejected_at_route_build(self) -> None:
        with self.assertRaises(KeyError):
            require_policy("superuser")


class TestResolveSort(unittest.TestCase):
    allowed = {"name": User.name, "email": User.email}

    def _sql(self, clause) -> str:
        return str(clause).lower()

    def test_known_field_and_order(self) -> None:
        clause = resolve_sort("email", "desc", self.allowed)
        self.assertIn("users.email", self._sql(clause))
        self.assertIn("desc", self._sql(clause))

    def test_unknown_field_falls_back_to_name(self) -> None:
        clause = resolve_sort("password_hash", "asc", self.allowed)
        self.assertIn("users.name", self._sql(clause))

    def test_unknown_order_falls_back_to_ascending(self) -> None:
        clause = resolve_sort("email", "sideways", self.allowed)
        self.assertIn("asc", self._sql(clause))

    def test_order_is_case_insensitive(self) -> None:
        self.assertIn("desc", self._sql(resolve_sort("name", "DESC", self.allowed)))

    def test_defaults(self) -> None:
        clause = resolve_sort(None, None, self.allowed)
        self.assertIn("users.name asc", self._sql(clause))


class TestPageMath(unittest.TestCase):
    def test_offset(self) -> None:
        self.assertEqual(PageRequest(page=1, limit=10).offset, 0)
        self.assertEqual(PageRequest(page=3, limit=5).offset, 10)

    def test_total_pages_rounds_up(self) -> None:
        self.assertEqual(PageResult(items=[], total=11, page=1, limit=5).total_pages, 3)
        self.assertEqual(PageResult(items=[], total=10, page=1, limit=5).total_pages, 2)
        self.assertEqual(PageResult(items=[], total=0, page=1, limit=5).total_pages, 0)


if __name__ == "__main__":
    unittest.main()
