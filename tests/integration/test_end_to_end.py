"""
End-to-end tests for flaguser.

Tests the complete flow:
1. Assemble a profile with the builder from loosely typed input
2. Hand the frozen profile to a consumer
3. Serialize it into an event payload and read it back
"""

import json
import logging

from flaguser.models import CountryCode, UserProfile, UserProfileBuilder


def targeting_consumer(profile: UserProfile) -> dict:
    """Stand-in for a rule evaluator that only reads the profile."""
    return {
        "key": profile.key,
        "secondary": profile.secondary,
        "in_us": profile.country == CountryCode.US,
        "is_gold": profile.get_custom("plan") == "gold",
        "in_beta": "beta" in (profile.get_custom("groups") or ()),
    }


class TestEndToEnd:
    """End-to-end flow tests."""

    def test_signup_form_to_payload(self, caplog):
        """Test a profile built from form-like input reaching a consumer."""
        form = {
            "email": "jane@example.com",
            "org": "acme",
            "remote_addr": "203.0.113.7",
            "country": "United States",
            "plan": "gold",
            "seats": 12,
            "groups": ["beta", "staff"],
        }

        with caplog.at_level(logging.WARNING):
            builder = (
                UserProfileBuilder(form["email"])
                .secondary(form["org"])
                .ip(form["remote_addr"])
                .country(form["country"])
            )
            for name in ("plan", "seats", "groups"):
                builder.custom(name, form[name])
            profile = builder.build()

        assert caplog.records == []
        assert targeting_consumer(profile) == {
            "key": "jane@example.com",
            "secondary": "acme",
            "in_us": True,
            "is_gold": True,
            "in_beta": True,
        }

        payload = json.dumps(profile.to_dict())
        restored = UserProfile.from_dict(json.loads(payload))

        assert restored == profile

    def test_bad_country_does_not_block_caller(self, caplog):
        """Test that unresolvable input still yields a usable profile."""
        with caplog.at_level(logging.WARNING):
            profile = (
                UserProfileBuilder("anon-session-42")
                .country("Unitedstatesofxyz")
                .custom_number("visits", 3)
                .build()
            )

        assert profile.country is None
        assert targeting_consumer(profile)["in_us"] is False
        assert profile.to_dict() == {
            "key": "anon-session-42",
            "custom": {"visits": 3},
        }
        assert len([r for r in caplog.records if r.levelno == logging.WARNING]) == 1

    def test_builder_reused_for_many_profiles(self):
        """Test a template builder producing variants."""
        builder = UserProfileBuilder("tenant-admin").country(CountryCode.GB)

        profiles = []
        for tier in ("bronze", "silver", "gold"):
            builder.custom_string("tier", tier)
            profiles.append(builder.build())

        assert [p.get_custom("tier") for p in profiles] == ["bronze", "silver", "gold"]
        assert all(p.country == CountryCode.GB for p in profiles)
