"""
Plan catalogue for the subscription tiers.

Single source of truth for what each tier costs and unlocks. Prices are in
INR; upgrades are simulated, so nothing here talks to a payment provider.
"""

from core.domain.subscription import Tier

PLANS = {
    Tier.EXPLORER: {
        "name": Tier.EXPLORER.value,
        "description": "Perfect for getting started",
        "price_monthly": 0,
        "price_yearly": 0,
        "currency": "INR",
        "features": [
            "Basic Interview Questions",
            "Basic System Design",
            "Basic Projects",
            "Community Access",
        ],
        "popular": False,
    },
    Tier.BUILDER: {
        "name": Tier.BUILDER.value,
        "description": "Best for interviews",
        "price_monthly": 80,
        "price_yearly": 800,
        "currency": "INR",
        "features": [
            f"Everything in {Tier.EXPLORER.value}",
            "Intermediate Questions",
            "Interactive Tutorials",
            "Intermediate Projects",
            "Progress Tracking",
        ],
        "popular": True,
    },
    Tier.INNOVATOR: {
        "name": Tier.INNOVATOR.value,
        "description": "Best for career growth",
        "price_monthly": 250,
        "price_yearly": 2500,
        "currency": "INR",
        "features": [
            f"Everything in {Tier.BUILDER.value}",
            "Advanced Questions",
            "Advanced Projects",
            "Scenario-Based Problems",
            "1-on-1 Mentoring",
            "Priority Support",
        ],
        "popular": False,
    },
}

# Length of one paid period, in days
BILLING_PERIOD_DAYS = {
    "monthly": 30,
    "yearly": 365,
}
