#!/usr/bin/env python3
"""
Create a usage profile row for local development.

Account creation normally happens in the identity provider's signup flow;
this tool stands in for it when running the backend locally.

Usage:
    python -m adsflow.scripts.create_profile <user_id> --plan business
    python -m adsflow.scripts.create_profile <user_id> --create-tables
"""
import argparse
import sys

from adsflow.core.database import create_all_tables
from adsflow.features.profiles.store import ProfileStore
from adsflow.models.profile import PlanTier


def main(argv=None) -> int:
    parser = argparse.ArgumentParser(description="Create an Ads Flow usage profile")
    parser.add_argument("user_id", help="Identity provider user id (JWT 'sub' claim)")
    parser.add_argument(
        "--plan",
        choices=[tier.value for tier in PlanTier],
        default=PlanTier.FREE.value,
        help="Subscription plan (default: free)",
    )
    parser.add_argument("--create-tables", action="store_true", help="Create missing tables first")
    args = parser.parse_args(argv)

    if args.create_tables:
        create_all_tables()

    try:
        profile = ProfileStore().create_profile(args.user_id, PlanTier(args.plan))
    except ValueError as e:
        print(f"ERROR: {e}")
        return 1

    print(f"Created profile {profile.user_id} on plan {profile.plan.value}")
    return 0


if __name__ == "__main__":
    sys.exit(main())
