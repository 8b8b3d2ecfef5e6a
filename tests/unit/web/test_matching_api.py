#!/usr/bin/env python3
"""
Unit tests for the matching API endpoints.

The engine runs over in-memory stores injected via dependency_overrides.
"""

import unittest

from fastapi.testclient import TestClient

from core.matching.exceptions import DependencyUnavailableError
from core.matching.models import Gender, GenderPreference
from core.matching.service import MatchingEngine
from tests.mocks.matching_mocks import (
    NOW, FlakyProfileStore, InMemoryBlockStore, InMemoryProfileStore,
    InMemorySwipeStore, make_preference, make_profile, north_of
)
from web.backend.app import app
from web.backend.dependencies import get_matching_service
from web.backend.services.matching_service import MatchingService


def population():
    return [
        make_profile(
            "req", gender=Gender.MALE, interests=["jazz"],
            preference=make_preference(GenderPreference.FEMALE, 22, 35, 25.0)
        ),
        make_profile("near", age=28, latitude=north_of(2.0), interests=["jazz"], display_name="Near"),
        make_profile("mid", age=33, latitude=north_of(12.0)),
        make_profile("far", age=30, latitude=north_of(40.0)),
        make_profile("man", gender=Gender.MALE, latitude=north_of(1.0)),
    ]


class MatchingApiTestCase(unittest.TestCase):

    def setUp(self):
        self.store = InMemoryProfileStore(population())
        self.blocks = InMemoryBlockStore()
        self.swipes = InMemorySwipeStore()
        self.use_store(self.store)
        self.client = TestClient(app)

    def tearDown(self):
        app.dependency_overrides.clear()

    def use_store(self, store):
        engine = MatchingEngine(store, self.swipes, self.blocks, clock=lambda: NOW)
        service = MatchingService(engine, retry_attempts=3, retry_wait_seconds=0)
        app.dependency_overrides[get_matching_service] = lambda: service


class TestPotentialMatches(MatchingApiTestCase):

    def test_ranked_candidates(self):
        response = self.client.get("/api/v1/matching/users/req/potential-matches")

        self.assertEqual(response.status_code, 200)
        body = response.json()
        self.assertTrue(body["success"])
        self.assertEqual(body["page"], 0)
        self.assertEqual(body["page_size"], 20)
        self.assertEqual([m["candidate_profile"]["user_id"] for m in body["matches"]], ["near", "mid"])

        first = body["matches"][0]
        self.assertEqual(first["candidate_profile"]["display_name"], "Near")
        self.assertEqual(first["candidate_profile"]["interests"], ["jazz"])
        self.assertTrue(first["candidate_profile"]["preference"]["unrestricted"])
        self.assertAlmostEqual(first["distance_km"], 2.0, places=2)
        self.assertTrue(0.0 <= first["compatibility_score"] <= 1.0)
        self.assertEqual(
            set(first["score_breakdown"]),
            {"distance", "interests", "age", "recency", "weights"}
        )

    def test_pagination(self):
        response = self.client.get(
            "/api/v1/matching/users/req/potential-matches", params={"limit": 1, "page": 1}
        )
        body = response.json()
        self.assertEqual(body["count"], 1)
        self.assertEqual(body["matches"][0]["candidate_profile"]["user_id"], "mid")

    def test_blocked_candidate_hidden(self):
        self.blocks.block("near", "req")
        response = self.client.get("/api/v1/matching/users/req/potential-matches")
        ids = [m["candidate_profile"]["user_id"] for m in response.json()["matches"]]
        self.assertEqual(ids, ["mid"])

    def test_unknown_user_is_404(self):
        response = self.client.get("/api/v1/matching/users/ghost/potential-matches")

        self.assertEqual(response.status_code, 404)
        self.assertEqual(response.json(), {
            "success": False,
            "error": "User not found with ID: ghost",
            "type": "UserNotFoundError"
        })

    def test_missing_profile_is_404(self):
        self.store.add_identity_only("bare")
        response = self.client.get("/api/v1/matching/users/bare/potential-matches")
        self.assertEqual(response.status_code, 404)
        self.assertEqual(response.json()["type"], "ProfileNotFoundError")

    def test_non_positive_limit_is_400(self):
        for limit in (0, -3):
            with self.subTest(limit=limit):
                response = self.client.get(
                    "/api/v1/matching/users/req/potential-matches", params={"limit": limit}
                )
                self.assertEqual(response.status_code, 400)
                self.assertEqual(response.json()["type"], "InvalidArgumentError")


class TestQueryModeEndpoints(MatchingApiTestCase):

    def test_nearby(self):
        response = self.client.get(
            "/api/v1/matching/users/req/nearby-matches", params={"radius_km": 5}
        )
        self.assertEqual(response.status_code, 200)
        ids = [m["candidate_profile"]["user_id"] for m in response.json()["matches"]]
        self.assertEqual(ids, ["near"])

    def test_nearby_rejects_non_positive_radius(self):
        response = self.client.get(
            "/api/v1/matching/users/req/nearby-matches", params={"radius_km": 0}
        )
        self.assertEqual(response.status_code, 400)

    def test_nearby_rejects_non_finite_radius(self):
        for radius in ("nan", "inf"):
            with self.subTest(radius=radius):
                response = self.client.get(
                    "/api/v1/matching/users/req/nearby-matches", params={"radius_km": radius}
                )
                self.assertEqual(response.status_code, 400)
                self.assertEqual(response.json()["type"], "InvalidArgumentError")

    def test_age_band(self):
        response = self.client.get(
            "/api/v1/matching/users/req/age-matches", params={"min_age": 30, "max_age": 40}
        )
        ids = [m["candidate_profile"]["user_id"] for m in response.json()["matches"]]
        self.assertEqual(ids, ["mid"])

    def test_inverted_age_band_is_400(self):
        response = self.client.get(
            "/api/v1/matching/users/req/age-matches", params={"min_age": 40, "max_age": 30}
        )
        self.assertEqual(response.status_code, 400)
        self.assertFalse(response.json()["success"])


class TestCompatibilityEndpoint(MatchingApiTestCase):

    def test_pair_score(self):
        response = self.client.get("/api/v1/matching/compatibility/req/far")

        self.assertEqual(response.status_code, 200)
        body = response.json()
        self.assertEqual(body["user_id"], "req")
        self.assertEqual(body["match"]["candidate_profile"]["user_id"], "far")
        self.assertAlmostEqual(body["match"]["distance_km"], 40.0, places=2)

    def test_unknown_pair_member(self):
        response = self.client.get("/api/v1/matching/compatibility/req/ghost")
        self.assertEqual(response.status_code, 404)


class TestDependencyFailures(MatchingApiTestCase):

    def test_transient_failure_is_retried(self):
        self.use_store(FlakyProfileStore(population(), failures=2))
        response = self.client.get("/api/v1/matching/users/req/potential-matches")
        self.assertEqual(response.status_code, 200)

    def test_persistent_failure_is_503(self):
        self.store.fail_with = DependencyUnavailableError("profile store unreachable")
        response = self.client.get("/api/v1/matching/users/req/potential-matches")

        self.assertEqual(response.status_code, 503)
        self.assertEqual(response.json()["type"], "DependencyUnavailableError")
        self.assertEqual(self.store.calls["find_identity"], 3)


class TestHealth(unittest.TestCase):

    def test_health(self):
        response = TestClient(app).get("/health")
        self.assertEqual(response.status_code, 200)
        self.assertEqual(response.json()["status"], "healthy")


if __name__ == '__main__':
    unittest.main()
