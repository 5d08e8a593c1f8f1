"""Unit and integration tests for rately.services.aggregation: cached store rating stats."""

import api_support  # noqa: F401  (test settings must load before rately)

import unittest
from unittest.mock import MagicMock

from sqlalchemy.exc import OperationalError

from api_support import DatabaseTestCase
from rately.core.roles import Role
from rately.models import Rating
from rately.services.aggregation import (
    compute_store_rating,
    recompute_store_rating,
    resync_all_stores,
    round_average,
)


class TestRoundAverage(unittest.TestCase):
    """Means are rounded half-up to one decimal; no ratings means 0."""

    def test_none_is_zero(self) -> None:
        self.assertEqual(round_average(None), 0.0)

    def test_rounds_to_one_decimal(self) -> None:
        self.assertEqual(round_average(4.666666), 4.7)
        self.assertEqual(round_average(3.333333), 3.3)

    def test_half_rounds_up(self) -> None:
        self.assertEqual(round_average(4.25), 4.3)
        self.assertEqual(round_average(2.75), 2.8)

    def test_whole_numbers_unchanged(self) -> None:
        self.assertEqual(round_average(4), 4.0)


class TestRecomputeFailure(unittest.TestCase):
    """A failed cache write is rolled back and logged, not raised."""

    def test_returns_none_and_rolls_back(self) -> None:
        session = MagicMock()
        session.query.return_value.filter.return_value.one.return_value = (2, 3.5)
        session.query.return_value.filter.return_value.update.side_effect = OperationalError(
            "UPDATE stores", {}, Exception("database is locked")
        )
        with self.assertLogs("rately.services.aggregation", level="ERROR") as logs:
            result = recompute_store_rating(session, 7)
        self.assertIsNone(result)
        session.rollback.assert_called_once()
        session.commit.assert_not_called()
        self.assertIn("recompute failed", logs.output[0])


class TestRecomputeAgainstDatabase(DatabaseTestCase):
    """Cached fields always equal the ledger's count and rounded mean."""

    def setUp(self) -> None:
        super().setUp()
        self.store = self.make_store()
        self.raters = [
            self.make_user(name=f"Rater Number {i}", email=f"rater{i}@rately.com")
            for i in range(3)
        ]

    def _add(self, rater, value: int) -> None:
        self.db.add(Rating(user_id=rater.id, store_id=self.store.id, value=value))
        self.db.commit()

    def test_empty_store_is_zero(self) -> None:
        self.assertEqual(compute_store_rating(self.db, self.store.id), (0.0, 0))
        self.assertEqual(recompute_store_rating(self.db, self.store.id), (0.0, 0))
        store = self.reload_store(self.store.id)
        self.assertEqual(store.average_rating, 0.0)
        self.assertEqual(store.total_ratings, 0)

    def test_recompute_writes_mean_and_count(self) -> None:
        for rater, value in zip(self.raters, (5, 4, 4)):
            self._add(rater, value)
        self.assertEqual(recompute_store_rating(self.db, self.store.id), (4.3, 3))
        store = self.reload_store(self.store.id)
        self.assertEqual(store.average_rating, 4.3)
        self.assertEqual(store.total_ratings, 3)

    def test_recompute_replaces_stale_values(self) -> None:
        self.store.average_rating = 1.0
        self.store.total_ratings = 99
        self.db.commit()
        self._add(self.raters[0], 3)
        recompute_store_rating(self.db, self.store.id)
        store = self.reload_store(self.store.id)
        self.assertEqual((store.average_rating, store.total_ratings), (3.0, 1))

    def test_resync_all_stores(self) -> None:
        owner = self.make_user(name="Owner Person", email="owner@rately.com", role=Role.STORE_OWNER)
        other = self.make_store(name="Other Shop", email="other@shop.com", owner=owner)
        self._add(self.raters[0], 2)
        self.db.add(Rating(user_id=self.raters[0].id, store_id=other.id, value=5))
        self.db.commit()

        self.assertEqual(resync_all_stores(self.db), 2)
        self.assertEqual(self.reload_store(self.store.id).average_rating, 2.0)
        self.assertEqual(self.reload_store(other.id).average_rating, 5.0)
        self.assertEqual(self.reload_store(other.id).total_ratings, 1)


if __name__ == "__main__":
    unittest.main()
