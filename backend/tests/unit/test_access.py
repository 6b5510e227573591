"""
Unit tests for tier-based access control.

Covers:
- resolve_tier / resolve_tier_rank with unknown names (lenient and strict)
- has_access for admins, missing tiers and rank comparison
- evaluate_access render states and their prompts
"""

import logging

import pytest

from core.access import (
    AccessAction,
    AccessState,
    evaluate_access,
    has_access,
    resolve_tier,
    resolve_tier_rank,
)
from core.domain.subscription import Tier
from core.domain.user import Principal
from core.exceptions import UnknownTierError


def member(tier=None, is_admin=False) -> Principal:
    return Principal(user_id="user-1", authenticated=True, is_admin=is_admin, tier=tier)


class TestResolveTier:
    def test_none_and_empty_are_lowest(self):
        assert resolve_tier(None) is Tier.EXPLORER
        assert resolve_tier("") is Tier.EXPLORER

    def test_alias(self):
        assert resolve_tier("Voyager") is Tier.BUILDER
        assert resolve_tier_rank("Voyager") == resolve_tier_rank("Builder") == 1

    def test_unknown_name_falls_back_with_warning(self, caplog):
        with caplog.at_level(logging.WARNING, logger="core.access"):
            assert resolve_tier("Platinum") is Tier.EXPLORER
        assert "Platinum" in caplog.text

    def test_unknown_name_raises_when_strict(self):
        with pytest.raises(UnknownTierError) as exc_info:
            resolve_tier("Platinum", strict=True)
        assert exc_info.value.tier_name == "Platinum"

    def test_strict_still_accepts_missing_tier(self):
        assert resolve_tier(None, strict=True) is Tier.EXPLORER


class TestHasAccess:
    @pytest.mark.parametrize(
        "principal_tier,required,expected",
        [
            (Tier.EXPLORER, "Explorer", True),
            (Tier.EXPLORER, "Builder", False),
            (Tier.BUILDER, "Builder", True),
            (Tier.BUILDER, "Innovator", False),
            (Tier.INNOVATOR, "Explorer", True),
            (Tier.INNOVATOR, "Innovator", True),
        ],
    )
    def test_rank_comparison(self, principal_tier, required, expected):
        assert has_access(member(principal_tier), required) is expected

    def test_admin_always_has_access(self):
        admin = member(tier=None, is_admin=True)
        assert has_access(admin, "Innovator")
        assert has_access(admin, "Platinum")

    def test_no_subscription_counts_as_lowest_tier(self):
        assert has_access(member(None), "Explorer")
        assert not has_access(member(None), "Builder")

    def test_content_without_tier_is_open(self):
        assert has_access(member(None), None)
        assert has_access(Principal.anonymous(), None)

    def test_unknown_content_tier_is_open_to_everyone(self):
        assert has_access(member(None), "Platinum")


class TestEvaluateAccess:
    def test_builder_viewing_innovator_content(self):
        decision = evaluate_access(
            member(Tier.BUILDER), "Innovator", pricing_url="http://localhost:5173/pricing"
        )

        assert decision.state is AccessState.UPGRADE_REQUIRED
        assert not decision.visible
        assert decision.required_tier is Tier.INNOVATOR
        assert decision.current_tier is Tier.BUILDER
        assert "Innovator" in decision.message
        assert "Builder" in decision.message
        assert decision.action is AccessAction.UPGRADE
        assert decision.action_label == "Upgrade to Innovator"
        assert decision.action_url == "http://localhost:5173/pricing"

    def test_upgrade_prompt_without_current_tier(self):
        decision = evaluate_access(member(None), "Builder")

        assert decision.state is AccessState.UPGRADE_REQUIRED
        assert decision.current_tier is None
        assert "current plan" not in decision.message

    def test_anonymous_is_asked_to_sign_in(self):
        decision = evaluate_access(
            Principal.anonymous(), "Explorer", sign_in_url="http://localhost:5173/auth"
        )

        assert decision.state is AccessState.SIGN_IN_REQUIRED
        assert decision.action is AccessAction.SIGN_IN
        assert decision.action_url == "http://localhost:5173/auth"

    def test_admin_sees_everything(self):
        decision = evaluate_access(member(None, is_admin=True), "Innovator")

        assert decision.visible
        assert decision.message is None

    def test_member_with_enough_rank(self):
        decision = evaluate_access(member(Tier.INNOVATOR), "Voyager")

        assert decision.visible
        assert decision.required_tier is Tier.BUILDER
        assert decision.current_tier is Tier.INNOVATOR

    def test_strict_mode_surfaces_bad_content_tier(self):
        with pytest.raises(UnknownTierError):
            evaluate_access(member(Tier.INNOVATOR), "Platinum", strict=True)
