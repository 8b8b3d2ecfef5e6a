#!/usr/bin/env python3
"""
Scoring Module - Weighted compatibility scoring.

Public API:
- CompatibilityScorer: Combines sub-scores into a single [0, 1] score

- subscores.py: Distance, interest overlap, age fit and recency signals
- service.py: CompatibilityScorer
"""

from core.scorer.service import CompatibilityScorer

__all__ = ['CompatibilityScorer']
