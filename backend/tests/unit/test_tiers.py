"""
Unit tests for subscription tier ordering and name resolution.
"""

import pytest

from core.domain.subscription import TIER_ALIASES, Tier, normalize_tier_name


class TestTierOrdering:
    def test_ranks_follow_declaration_order(self):
        assert [t.rank for t in Tier] == [0, 1, 2]
        assert Tier.lowest() is Tier.EXPLORER

    def test_comparisons_use_rank_not_name(self):
        # Alphabetically "Builder" < "Explorer"; by rank it is the other way round
        assert Tier.EXPLORER < Tier.BUILDER < Tier.INNOVATOR
        assert Tier.INNOVATOR >= Tier.BUILDER
        assert not Tier.BUILDER <= Tier.EXPLORER
        assert max(Tier) is Tier.INNOVATOR


class TestTierParse:
    @pytest.mark.parametrize(
        "name,expected",
        [
            ("Explorer", Tier.EXPLORER),
            ("Builder", Tier.BUILDER),
            ("Innovator", Tier.INNOVATOR),
            ("Voyager", Tier.BUILDER),
        ],
    )
    def test_known_names(self, name, expected):
        assert Tier.parse(name) is expected

    def test_unknown_and_missing_names(self):
        assert Tier.parse("Platinum") is None
        assert Tier.parse("builder") is None  # exact match only
        assert Tier.parse(None) is None

    def test_passes_tier_through(self):
        assert Tier.parse(Tier.INNOVATOR) is Tier.INNOVATOR

    def test_voyager_is_the_only_alias(self):
        assert TIER_ALIASES == {"Voyager": Tier.BUILDER}


class TestNormalizeTierName:
    def test_canonical_spelling(self):
        assert normalize_tier_name("Voyager") == "Builder"
        assert normalize_tier_name("Innovator") == "Innovator"

    def test_empty_and_unknown(self):
        assert normalize_tier_name("") is None
        assert normalize_tier_name(None) is None
        assert normalize_tier_name("Gold") is None
