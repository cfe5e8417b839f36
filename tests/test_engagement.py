"""Tests for the engagement rate and shared rounding helpers."""
from __future__ import annotations

import importlib

import pytest

from posttime_ai.analysis.engagement import (
    as_count,
    engagement_rate,
    round1,
    round_half_up,
    round_int,
)


class TestEngagementRate:
    def test_basic_rate(self):
        # (50 + 10) / 1000 * 100 = 6.0
        assert engagement_rate(50, 10, 1000) == 6.0

    def test_rounds_to_one_decimal(self):
        # (1 + 0) / 3 * 100 = 33.33...
        assert engagement_rate(1, 0, 3) == 33.3
        # 2 / 3 * 100 = 66.66...
        assert engagement_rate(2, 0, 3) == 66.7

    def test_zero_views_is_zero(self):
        assert engagement_rate(500, 200, 0) == 0.0
        assert engagement_rate(0, 0, 0) == 0.0

    def test_negative_views_is_zero(self):
        assert engagement_rate(5, 5, -10) == 0.0

    def test_not_capped_at_100(self):
        assert engagement_rate(300, 50, 100) == 350.0

    def test_missing_and_string_counters(self):
        assert engagement_rate(None, "10", "200") == 5.0
        assert engagement_rate("abc", None, 100) == 0.0

    @pytest.mark.parametrize("likes,comments,views", [
        (7, 3, 91), (123, 45, 6789), (1, 1, 7), (999, 0, 1000),
    ])
    def test_matches_formula(self, likes, comments, views):
        expected = round_half_up((likes + comments) / views * 100, 1)
        assert engagement_rate(likes, comments, views) == expected


class TestRounding:
    def test_half_up_not_bankers(self):
        assert round_int(2.5) == 3
        assert round_int(0.5) == 1
        assert round1(0.25) == 0.3

    def test_round_int_returns_int(self):
        assert isinstance(round_int(1999.6), int)
        assert round_int(1999.6) == 2000

    def test_negative_half_rounds_away_from_zero(self):
        assert round1(-0.25) == -0.3


class TestAsCount:
    def test_coercions(self):
        assert as_count("42") == 42
        assert as_count(None) == 0
        assert as_count("") == 0
        assert as_count(-5) == 0
        assert as_count(7) == 7


class TestModuleDocstrings:
    @pytest.mark.parametrize("module", [
        "posttime_ai.analysis.engagement",
        "posttime_ai.analysis.heatmap",
        "posttime_ai.analysis.statistics",
        "posttime_ai.analysis.time_slots",
        "posttime_ai.errors",
        "posttime_ai.ingestion.resolver",
    ])
    def test_docstring_is_module_doc(self, module):
        assert importlib.import_module(module).__doc__
