#!/usr/bin/env python3
"""
flaguser Demo

Demonstrates building user profiles:
1. Resolve country input (codes, names, ambiguous and invalid text)
2. Attach custom attributes
3. Serialize the profile for an event payload

Usage:
    python demo.py [country]
    python demo.py  # Uses a handful of sample inputs
"""

import json
import logging
import sys

from flaguser.models import UserProfileBuilder


SAMPLE_COUNTRIES = ["US", "deu", "United States", "Congo", "United", "Unitedstatesofxyz"]


def main(countries=None):
    """Run the demo."""
    logging.basicConfig(
        level=logging.INFO,
        format='%(asctime)s - %(name)s - %(levelname)s - %(message)s',
    )

    print("=" * 50)
    print("flaguser Demo")
    print("=" * 50)
    print()

    countries = countries or SAMPLE_COUNTRIES

    # =========================================================================
    # Step 1: Country resolution
    # =========================================================================
    print("Step 1: Resolving country input...")
    for value in countries:
        builder = UserProfileBuilder("demo-user").country(value)
        country = builder.build().country
        resolved = f"{country.alpha2} ({country.country_name})" if country else "unset"
        flag = " [warning]" if builder.warnings else ""
        print(f"  {value!r:22} -> {resolved}{flag}")
    print()

    # =========================================================================
    # Step 2: Full profile
    # =========================================================================
    print("Step 2: Building a full profile...")
    profile = (
        UserProfileBuilder("jane@example.com")
        .secondary("acme")
        .ip("203.0.113.7")
        .country(countries[0])
        .custom_string("plan", "gold")
        .custom_number("seats", 12)
        .custom_string_list("groups", ["beta", "staff"])
        .build()
    )
    print(f"  Key:     {profile.key}")
    print(f"  Country: {profile.country.alpha2 if profile.country else 'unset'}")
    print(f"  Custom:  {', '.join(profile.custom_attribute_names)}")
    print()

    # =========================================================================
    # Step 3: Payload
    # =========================================================================
    print("Step 3: Event payload")
    print(json.dumps(profile.to_dict(), indent=2))

    return 0


if __name__ == "__main__":
    sys.exit(main(sys.argv[1:]))
