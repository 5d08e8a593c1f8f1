"""API tests for rating submission, store browsing and the cached aggregate invariant."""

import api_support  # noqa: F401  (test settings must load before rately)

import unittest
from unittest.mock import patch

from api_support import ApiTestCase
from rately.core.roles import Role
from rately.models import Rating
from rately.services import ratings as rating_service


class TestRatingScenario(ApiTestCase):
    """Admin sets up Alice's store, Bob rates it, then re-rates it."""

    def test_create_then_overwrite(self) -> None:
        admin = self.make_user(name="Admin Person", email="admin@rately.com", role=Role.SYSTEM_ADMIN)
        created = self.client.post(
            "/api/admin/users",
            json={
                "name": "Alice Owner",
                "email": "alice@rately.com",
                "password": "Alice@123",
                "address": "1 Alice Way",
                "role": "store_owner",
            },
            headers=self.auth(admin),
        )
        self.assertEqual(created.status_code, 201)
        alice_id = created.json()["user"]["id"]

        store = self.client.post(
            "/api/admin/stores",
            json={
                "name": "Alice's Shop",
                "email": "shop@alice.com",
                "address": "1 Alice Way",
                "ownerId": alice_id,
            },
            headers=self.auth(admin),
        )
        self.assertEqual(store.status_code, 201)
        store_id = store.json()["store"]["id"]
        self.assertEqual(store.json()["store"]["ownerId"], alice_id)

        bob = self.client.post(
            "/api/auth/register",
            json={
                "name": "Bob Rater",
                "email": "bob@rately.com",
                "password": "Bobby@123",
                "address": "2 Bob Street",
            },
        )
        bob_headers = {"Authorization": f"Bearer {bob.json()['token']}"}

        first = self.client.post(
            "/api/stores/ratings", json={"storeId": store_id, "rating": 4}, headers=bob_headers
        )
        self.assertEqual(first.status_code, 200)
        self.assertEqual(first.json(), {"message": "Rating submitted successfully"})
        detail = self.client.get(f"/api/stores/{store_id}", headers=bob_headers).json()["store"]
        self.assertEqual(detail["averageRating"], 4.0)
        self.assertEqual(detail["totalRatings"], 1)
        self.assertEqual(detail["userRating"], 4)

        second = self.client.post(
            "/api/stores/ratings", json={"storeId": store_id, "rating": 2}, headers=bob_headers
        )
        self.assertEqual(second.status_code, 200)
        ratings = self.ratings_for(store_id)
        self.assertEqual(len(ratings), 1)
        self.assertEqual(ratings[0].value, 2)
        detail = self.client.get(f"/api/stores/{store_id}", headers=bob_headers).json()["store"]
        self.assertEqual(detail["averageRating"], 2.0)
        self.assertEqual(detail["totalRatings"], 1)


class TestRatingValidation(ApiTestCase):
    def setUp(self) -> None:
        super().setUp()
        self.user = self.make_user()
        self.store = self.make_store()

    def _assert_no_change(self) -> None:
        self.assertEqual(self.ratings_for(self.store.id), [])
        store = self.reload_store(self.store.id)
        self.assertEqual((store.average_rating, store.total_ratings), (0.0, 0))

    def test_out_of_range_rejected(self) -> None:
        for value in (0, 6, -1):
            response = self.rate(self.user, self.store, value)
            self.assertEqual(response.status_code, 400, value)
            self.assertEqual(
                response.json(), {"error": "Rating must be an integer between 1 and 5"}
            )
        self._assert_no_change()

    def test_non_integer_rejected(self) -> None:
        for value in (3.5, "4", True):
            response = self.rate(self.user, self.store, value)
            self.assertEqual(response.status_code, 400, value)
        self._assert_no_change()

    def test_missing_fields(self) -> None:
        response = self.client.post(
            "/api/stores/ratings", json={"rating": 3}, headers=self.auth(self.user)
        )
        self.assertEqual(response.status_code, 400)
        self.assertEqual(response.json(), {"error": "Store ID and rating are required"})
        response = self.client.post(
            "/api/stores/ratings", json={"storeId": self.store.id}, headers=self.auth(self.user)
        )
        self.assertEqual(response.status_code, 400)
        self._assert_no_change()

    def test_unknown_store(self) -> None:
        response = self.client.post(
            "/api/stores/ratings",
            json={"storeId": self.store.id + 100, "rating": 3},
            headers=self.auth(self.user),
        )
        self.assertEqual(response.status_code, 404)
        self.assertEqual(response.json(), {"error": "Store not found"})

    def test_store_owner_cannot_rate(self) -> None:
        owner = self.make_user(name="Owner Person", email="owner@rately.com", role=Role.STORE_OWNER)
        response = self.rate(owner, self.store, 5)
        self.assertEqual(response.status_code, 403)
        self._assert_no_change()


class TestConcurrentFirstRating(ApiTestCase):
    """A first rating that collides with a row committed meanwhile becomes an overwrite."""

    def test_unique_conflict_is_retried_as_overwrite(self) -> None:
        user = self.make_user()
        store = self.make_store()
        self.db.add(Rating(user_id=user.id, store_id=store.id, value=2))
        self.db.commit()

        real_find = rating_service._find_rating
        calls = []

        def miss_first_lookup(db, user_id, store_id):
            calls.append((user_id, store_id))
            if len(calls) == 1:
                return None
            return real_find(db, user_id, store_id)

        with patch.object(rating_service, "_find_rating", side_effect=miss_first_lookup):
            response = self.rate(user, store, 5)

        self.assertEqual(response.status_code, 200)
        self.assertEqual(len(calls), 2)
        ledger = self.ratings_for(store.id)
        self.assertEqual([(r.user_id, r.value) for r in ledger], [(user.id, 5)])
        cached = self.reload_store(store.id)
        self.assertEqual((cached.average_rating, cached.total_ratings), (5.0, 1))


class TestAggregateInvariant(ApiTestCase):
    """After every write the cache equals the ledger's count and rounded mean."""

    def test_many_users_and_rewrites(self) -> None:
        store = self.make_store()
        users = [
            self.make_user(name=f"Rater Number {i}", email=f"rater{i}@rately.com")
            for i in range(4)
        ]
        writes = [(0, 5), (1, 4), (2, 4), (0, 1), (3, 2), (2, 5)]
        for index, value in writes:
            self.assertEqual(self.rate(users[index], store, value).status_code, 200)
            ledger = [r.value for r in self.ratings_for(store.id)]
            cached = self.reload_store(store.id)
            self.assertEqual(cached.total_ratings, len(ledger))
            expected = round(sum(ledger) / len(ledger) + 1e-9, 1)
            self.assertAlmostEqual(cached.average_rating, expected)

        # 1, 4, 5, 2 -> 3.0
        self.assertEqual(self.reload_store(store.id).average_rating, 3.0)
        self.assertEqual(self.reload_store(store.id).total_ratings, 4)

    def test_other_stores_untouched(self) -> None:
        user = self.make_user()
        rated = self.make_store()
        untouched = self.make_store(name="Quiet Shop", email="quiet@shop.com")
        self.rate(user, rated, 5)
        self.assertEqual(self.reload_store(untouched.id).total_ratings, 0)


class TestStoreBrowsing(ApiTestCase):
    def setUp(self) -> None:
        super().setUp()
        self.user = self.make_user()
        self.other = self.make_user(name="Other Rater", email="other@rately.com")
        self.apple = self.make_store(name="Apple Corner", email="apple@shop.com", address="1 Orchard Road")
        self.bakery = self.make_store(name="Bakery Bliss", email="bakery@shop.com", address="9 Flour Lane")
        self.candle = self.make_store(name="Candle Craft", email="candle@shop.com", address="3 Wax Street")
        self.rate(self.user, self.bakery, 3)
        self.rate(self.other, self.apple, 5)

    def test_lists_with_own_rating(self) -> None:
        response = self.client.get("/api/stores", headers=self.auth(self.user))
        self.assertEqual(response.status_code, 200)
        data = response.json()
        by_name = {s["name"]: s for s in data["stores"]}
        self.assertEqual(list(by_name), ["Apple Corner", "Bakery Bliss", "Candle Craft"])
        self.assertIsNone(by_name["Apple Corner"]["userRating"])
        self.assertEqual(by_name["Apple Corner"]["averageRating"], 5.0)
        self.assertEqual(by_name["Bakery Bliss"]["userRating"], 3)
        self.assertEqual(
            data["pagination"],
            {"currentPage": 1, "totalPages": 1, "totalStores": 3, "limit": 10},
        )

    def test_filter_sort_and_paginate(self) -> None:
        response = self.client.get(
            "/api/stores",
            params={"sortBy": "averageRating", "sortOrder": "desc", "limit": 2, "page": 1},
            headers=self.auth(self.user),
        )
        data = response.json()
        self.assertEqual([s["name"] for s in data["stores"]], ["Apple Corner", "Bakery Bliss"])
        self.assertEqual(data["pagination"]["totalPages"], 2)

        response = self.client.get(
            "/api/stores", params={"address": "flour"}, headers=self.auth(self.user)
        )
        self.assertEqual([s["name"] for s in response.json()["stores"]], ["Bakery Bliss"])

    def test_unknown_sort_falls_back_to_name(self) -> None:
        response = self.client.get(
            "/api/stores",
            params={"sortBy": "ownerId", "sortOrder": "upwards"},
            headers=self.auth(self.user),
        )
        names = [s["name"] for s in response.json()["stores"]]
        self.assertEqual(names, ["Apple Corner", "Bakery Bliss", "Candle Craft"])

    def test_invalid_page_is_400(self) -> None:
        response = self.client.get("/api/stores", params={"page": 0}, headers=self.auth(self.user))
        self.assertEqual(response.status_code, 400)

    def test_get_unknown_store(self) -> None:
        response = self.client.get("/api/stores/999", headers=self.auth(self.user))
        self.assertEqual(response.status_code, 404)

    def test_my_ratings(self) -> None:
        self.rate(self.user, self.candle, 4)
        response = self.client.get("/api/stores/user/ratings", headers=self.auth(self.user))
        self.assertEqual(response.status_code, 200)
        ratings = response.json()["ratings"]
        self.assertEqual(
            sorted((r["storeName"], r["rating"]) for r in ratings),
            [("Bakery Bliss", 3), ("Candle Craft", 4)],
        )
        self.assertTrue(all("storeAddress" in r for r in ratings))


if __name__ == "__main__":
    unittest.main()
