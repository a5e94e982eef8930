"""
Security tests for flaguser.

Tests cover:
- Regex metacharacters in country input are matched literally
- Oversized and control-character input never raises
- Built profiles cannot be altered through the builder
"""

import pytest

from flaguser.models import CountryCode, UserProfileBuilder


class TestRegexInjection:
    """Country input is used as a literal prefix, never as a pattern."""

    @pytest.mark.parametrize("value", [
        ".*",
        "U.*",
        "(",
        "[",
        "United|Germany",
        "^Germany$",
        "\\d+",
        "(a+)+$",
    ])
    def test_metacharacters_do_not_match_as_regex(self, value):
        """Ensure regex syntax in input does not widen the match."""
        builder = UserProfileBuilder("u").country(value)

        assert builder.build().country is None
        assert len(builder.warnings) == 1

    def test_parentheses_in_real_name(self):
        """Ensure names containing parentheses resolve literally."""
        profile = UserProfileBuilder("u").country("Holy See (Vatican").build()
        assert profile.country == CountryCode.VA

    def test_dot_in_real_name(self):
        """Ensure an exact name with a dot is matched literally."""
        builder = UserProfileBuilder("u").country("Virgin Islands, U.S.")

        assert builder.build().country == CountryCode.VI
        assert builder.warnings == []


class TestHostileInput:
    """Malformed input is absorbed, never propagated."""

    def test_very_long_country(self):
        """Ensure a huge country string only produces a warning."""
        builder = UserProfileBuilder("u").country("A" * 100_000)

        assert builder.build().country is None
        assert len(builder.warnings) == 1

    def test_control_characters(self):
        """Ensure control characters are treated as ordinary text."""
        builder = UserProfileBuilder("u").country("Germany\n\x00")

        assert builder.build().country is None
        assert len(builder.warnings) == 1

    def test_key_and_ip_stored_verbatim(self):
        """Ensure no sanitization or interpretation of free-form fields."""
        payload = "'; DROP TABLE users; --"
        profile = UserProfileBuilder(payload).ip(payload).build()

        assert profile.key == payload
        assert profile.ip == payload


class TestImmutability:
    """Built profiles are isolated from their builder."""

    def test_list_attribute_cannot_be_mutated(self):
        """Ensure list attributes are stored as tuples."""
        profile = UserProfileBuilder("u").custom_string_list("roles", ["viewer"]).build()

        with pytest.raises(AttributeError):
            profile.get_custom("roles").append("admin")

    def test_privilege_change_after_build(self):
        """Ensure a later builder call cannot escalate an issued profile."""
        builder = UserProfileBuilder("u").custom_string("role", "viewer")
        issued = builder.build()

        builder.custom_string("role", "admin")

        assert issued.get_custom("role") == "viewer"

    def test_custom_map_cannot_be_rewritten(self):
        """Ensure an issued profile's custom map rejects writes."""
        issued = UserProfileBuilder("u").custom_string("role", "viewer").build()

        with pytest.raises(TypeError):
            issued.custom["role"] = "admin"

        assert issued.get_custom("role") == "viewer"
