#!/usr/bin/env python3
"""
Unit tests for ExclusionResolver and ExclusionSet.
"""

import unittest
from unittest.mock import MagicMock

from core.config_loader import ExclusionConfig
from core.matching.exclusion import (
    REASON_BLOCKED, REASON_SELF, REASON_SWIPED, ExclusionResolver, ExclusionSet
)
from tests.mocks.matching_mocks import InMemoryBlockStore, InMemorySwipeStore


class TestExclusionResolver(unittest.TestCase):

    def setUp(self):
        self.swipes = InMemorySwipeStore()
        self.blocks = InMemoryBlockStore()
        self.resolver = ExclusionResolver(self.swipes, self.blocks)

    def test_self_is_excluded_without_store_access(self):
        swipes = MagicMock()
        blocks = MagicMock()
        resolver = ExclusionResolver(swipes, blocks)

        self.assertEqual(resolver.reason("u1", "u1"), REASON_SELF)
        swipes.has_swiped.assert_not_called()
        blocks.is_blocked.assert_not_called()

    def test_block_checked_before_swipe(self):
        swipes = MagicMock()
        blocks = MagicMock()
        blocks.is_blocked.return_value = True
        resolver = ExclusionResolver(swipes, blocks)

        self.assertEqual(resolver.reason("u1", "u2"), REASON_BLOCKED)
        swipes.has_swiped.assert_not_called()

    def test_block_in_either_direction(self):
        self.blocks.block("u2", "u1")
        self.assertTrue(self.resolver.is_excluded("u1", "u2"))
        self.assertTrue(self.resolver.is_excluded("u2", "u1"))

    def test_prior_swipe_excludes(self):
        self.swipes.swipe("u1", "u2")
        self.assertEqual(self.resolver.reason("u1", "u2"), REASON_SWIPED)
        # Swipes are directional
        self.assertFalse(self.resolver.is_excluded("u2", "u1"))

    def test_unrelated_pair_not_excluded(self):
        self.assertIsNone(self.resolver.reason("u1", "u3"))

    def test_rewound_swipe_resurfaces_by_default(self):
        self.swipes.swipe("u1", "u2", is_rewind=True)
        self.assertFalse(self.resolver.include_rewound)
        self.assertFalse(self.resolver.is_excluded("u1", "u2"))

    def test_rewound_swipe_excludes_when_configured(self):
        self.swipes.swipe("u1", "u2", is_rewind=True)
        resolver = ExclusionResolver(
            self.swipes, self.blocks, ExclusionConfig(rewound_swipes_exclude=True)
        )
        self.assertTrue(resolver.is_excluded("u1", "u2"))

    def test_snapshot_fetches_each_store_once(self):
        self.blocks.block("u1", "u2")
        self.blocks.block("u3", "u1")
        self.swipes.swipe("u1", "u4")
        self.swipes.swipe("u1", "u5", is_rewind=True)

        snapshot = self.resolver.snapshot("u1")

        self.assertEqual(self.blocks.calls, 1)
        self.assertEqual(self.swipes.calls, 1)
        self.assertEqual(snapshot.blocked_ids, frozenset({"u2", "u3"}))
        self.assertEqual(snapshot.swiped_ids, frozenset({"u4"}))
        self.assertEqual(snapshot.reason("u1"), REASON_SELF)
        self.assertEqual(snapshot.reason("u3"), REASON_BLOCKED)
        self.assertEqual(snapshot.reason("u4"), REASON_SWIPED)
        self.assertFalse(snapshot.excludes("u5"))


class TestExclusionSet(unittest.TestCase):

    def test_order_is_self_then_block_then_swipe(self):
        snapshot = ExclusionSet("u1", blocked_ids=frozenset({"u1", "u2"}), swiped_ids=frozenset({"u1", "u2"}))
        self.assertEqual(snapshot.reason("u1"), REASON_SELF)
        self.assertEqual(snapshot.reason("u2"), REASON_BLOCKED)


if __name__ == '__main__':
    unittest.main()
