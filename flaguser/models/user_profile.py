"""
UserProfile model - End-user identity and attributes for flag evaluation.

Uses Pydantic v2 for the immutable profile. Profiles are assembled with
UserProfileBuilder, which normalizes country input and never raises for
malformed attribute values.
"""

import logging
import re
from collections.abc import Iterable
from numbers import Real
from types import MappingProxyType
from typing import Any, Dict, List, Mapping, Optional, Tuple, Union

from pydantic import BaseModel, Field, field_serializer, field_validator

from .country_code import CountryCode
from flaguser.utils.constants import (
    COUNTRY_CODE_CASE_SENSITIVE,
    COUNTRY_NAME_PREFIX_SUFFIX,
    FIELD_COUNTRY,
    FIELD_CUSTOM,
    FIELD_IP,
    FIELD_KEY,
    FIELD_SECONDARY,
    MSG_AMBIGUOUS_COUNTRY,
    MSG_INVALID_COUNTRY,
    MSG_UNSUPPORTED_ATTRIBUTE,
    MSG_UNSUPPORTED_CUSTOM,
)


logger = logging.getLogger(__name__)

CustomValue = Union[str, int, float, Tuple[str, ...]]


def _plain_custom(custom: Mapping[str, CustomValue]) -> Dict[str, Any]:
    """Copy custom attributes into a JSON-ready dict (sequences as lists)."""
    return {
        name: list(value) if isinstance(value, tuple) else value
        for name, value in custom.items()
    }


class UserProfile(BaseModel):
    """
    Attributes of a single end-user.

    The only mandatory attribute is key, which must uniquely identify the
    user (username, e-mail, session ID...). ip and country are interpreted
    attributes; custom attributes are opaque values used by targeting rules.

    Instances are frozen and hashable. The custom attribute map is read-only.
    Build them with UserProfile.builder(key).
    """
    key: Optional[str]
    secondary: Optional[str] = None
    ip: Optional[str] = None
    country: Optional[CountryCode] = None
    custom: Dict[str, CustomValue] = Field(
        default_factory=dict, validate_default=True
    )

    model_config = {"frozen": True}

    @field_validator("country", mode="before")
    @classmethod
    def resolve_country_code(cls, v: Any) -> Any:
        """Accept ISO alpha-2/alpha-3 strings when constructing directly."""
        if isinstance(v, str):
            return CountryCode.get_by_code(
                v, case_sensitive=COUNTRY_CODE_CASE_SENSITIVE
            ) or v
        return v

    @field_validator("custom", mode="after")
    @classmethod
    def freeze_custom(cls, v: Dict[str, CustomValue]) -> Mapping[str, CustomValue]:
        return MappingProxyType(dict(v))

    @field_serializer("custom")
    def serialize_custom(self, v: Mapping[str, CustomValue]) -> Dict[str, Any]:
        return _plain_custom(v)

    def __hash__(self) -> int:
        return hash((
            self.key,
            self.secondary,
            self.ip,
            self.country,
            frozenset(self.custom.items()),
        ))

    @classmethod
    def builder(cls, key: Optional[str]) -> 'UserProfileBuilder':
        """Start a builder for a profile with the given key."""
        return UserProfileBuilder(key)

    def get_custom(self, name: str) -> Optional[CustomValue]:
        """
        Get a custom attribute by name.

        Returns:
            The stored value, or None if the attribute was never set
        """
        return self.custom.get(name)

    @property
    def custom_attribute_names(self) -> List[str]:
        return list(self.custom)

    def to_dict(self) -> Dict[str, Any]:
        """
        Serialize the profile for downstream consumers.

        Unset optional attributes and an empty custom map are omitted.
        Country is rendered as its alpha-2 code, sequences as lists.

        Returns:
            Dictionary representation of the profile
        """
        data: Dict[str, Any] = {FIELD_KEY: self.key}

        if self.secondary is not None:
            data[FIELD_SECONDARY] = self.secondary
        if self.ip is not None:
            data[FIELD_IP] = self.ip
        if self.country is not None:
            data[FIELD_COUNTRY] = self.country.alpha2
        if self.custom:
            data[FIELD_CUSTOM] = _plain_custom(self.custom)

        return data

    @classmethod
    def from_dict(
        cls, data: Dict[str, Any], log: Optional[logging.Logger] = None
    ) -> 'UserProfile':
        """
        Create UserProfile from dictionary.

        Country goes through the same lenient resolution as
        UserProfileBuilder.country(), so names and alpha-3 codes are accepted.

        Args:
            data: Dictionary with profile fields
            log: Optional logger for resolution warnings

        Returns:
            New UserProfile instance

        Raises:
            ValueError: If the key field is missing
        """
        if FIELD_KEY not in data:
            raise ValueError(f"Missing required field '{FIELD_KEY}': {sorted(data)}")

        builder = UserProfileBuilder(data[FIELD_KEY], log=log)
        builder.secondary(data.get(FIELD_SECONDARY))
        builder.ip(data.get(FIELD_IP))

        country = data.get(FIELD_COUNTRY)
        if country is not None:
            builder.country(country)

        for name, value in (data.get(FIELD_CUSTOM) or {}).items():
            builder.custom(name, value)

        return builder.build()


class UserProfileBuilder:
    """
    Fluent builder for UserProfile.

    Calls can be chained:

        profile = (
            UserProfileBuilder("key")
            .country("US")
            .ip("192.168.0.1")
            .build()
        )

    Setters never raise. Input of the wrong type is logged, recorded in
    `warnings` and ignored, so build() always succeeds.
    """

    def __init__(
        self, key: Optional[str], log: Optional[logging.Logger] = None
    ) -> None:
        """
        Create a builder for the given key.

        Args:
            key: Unique key for the user
            log: Collaborator receiving warnings. Defaults to the
                 module logger.
        """
        self._key = key
        self._secondary: Optional[str] = None
        self._ip: Optional[str] = None
        self._country: Optional[CountryCode] = None
        self._custom: Dict[str, CustomValue] = {}
        self._logger = log or logger
        self.warnings: List[str] = []

    def ip(self, value: Optional[str]) -> 'UserProfileBuilder':
        """Set the IP address for the user. Non-string values are ignored."""
        if value is None or isinstance(value, str):
            self._ip = value
        else:
            self._warn(MSG_UNSUPPORTED_ATTRIBUTE.format(name=FIELD_IP, value=value))
        return self

    def secondary(self, value: Optional[str]) -> 'UserProfileBuilder':
        """Set the secondary key for the user. Non-string values are ignored."""
        if value is None or isinstance(value, str):
            self._secondary = value
        else:
            self._warn(
                MSG_UNSUPPORTED_ATTRIBUTE.format(name=FIELD_SECONDARY, value=value)
            )
        return self

    def country(
        self, value: Union[CountryCode, str, None]
    ) -> 'UserProfileBuilder':
        """
        Set the country for the user.

        A CountryCode (or None) is stored as is. A string should be a valid
        ISO-3166-1 alpha-2 or alpha-3 code; otherwise it is looked up as the
        start of a country name:
            - no match: a warning is logged and the country is unset
            - one match: that country is used
            - several matches: an exact name match wins; otherwise a warning
              is logged and the first country in table order is used

        Args:
            value: Country code, country name, or CountryCode

        Returns:
            The builder
        """
        if value is None or isinstance(value, CountryCode):
            self._country = value
            return self

        if not isinstance(value, str):
            self._country = None
            self._warn(MSG_INVALID_COUNTRY.format(value=value))
            return self

        self._country = CountryCode.get_by_code(
            value, case_sensitive=COUNTRY_CODE_CASE_SENSITIVE
        )
        if self._country is not None:
            return self

        candidates = CountryCode.find_by_name(
            re.escape(value) + COUNTRY_NAME_PREFIX_SUFFIX
        )

        if not candidates:
            self._warn(MSG_INVALID_COUNTRY.format(value=value))
        elif len(candidates) > 1:
            for candidate in candidates:
                if candidate.country_name == value:
                    self._country = candidate
                    return self
            self._warn(MSG_AMBIGUOUS_COUNTRY.format(value=value))
            self._country = candidates[0]
        else:
            self._country = candidates[0]

        return self

    def custom_string(self, name: str, value: str) -> 'UserProfileBuilder':
        """Add a string-valued custom attribute."""
        if isinstance(value, str):
            self._set_custom(name, value)
        else:
            self._warn(MSG_UNSUPPORTED_CUSTOM.format(name=name, value=value))
        return self

    def custom_number(
        self, name: str, value: Union[int, float]
    ) -> 'UserProfileBuilder':
        """Add a number-valued custom attribute. Booleans are not numbers here."""
        if not isinstance(value, Real) or isinstance(value, bool):
            self._warn(MSG_UNSUPPORTED_CUSTOM.format(name=name, value=value))
            return self

        if not isinstance(value, (int, float)):
            value = float(value)
        self._set_custom(name, value)
        return self

    def custom_string_list(
        self, name: str, values: Iterable
    ) -> 'UserProfileBuilder':
        """
        Add a list of strings as a single custom attribute.

        Order is preserved. Values are copied, so later changes to the
        caller's list are not seen by the builder. A bare string, or a
        sequence holding anything but strings, is ignored.
        """
        if isinstance(values, (str, bytes)) or not isinstance(values, Iterable):
            self._warn(MSG_UNSUPPORTED_CUSTOM.format(name=name, value=values))
            return self

        items = tuple(values)
        if not all(isinstance(v, str) for v in items):
            self._warn(MSG_UNSUPPORTED_CUSTOM.format(name=name, value=values))
            return self

        self._set_custom(name, items)
        return self

    def custom(self, name: str, value: Any) -> 'UserProfileBuilder':
        """
        Add a custom attribute, choosing the setter from the value's type.

        Accepts str, int/float (not bool) and lists or tuples of str.
        Anything else is logged and ignored.
        """
        if isinstance(value, str):
            return self.custom_string(name, value)

        if isinstance(value, Real) and not isinstance(value, bool):
            return self.custom_number(name, value)

        if isinstance(value, (list, tuple)):
            return self.custom_string_list(name, value)

        self._warn(MSG_UNSUPPORTED_CUSTOM.format(name=name, value=value))
        return self

    def build(self) -> UserProfile:
        """
        Build the configured UserProfile.

        The custom attributes are copied; changes made to this builder
        afterwards do not affect the returned profile.
        """
        return UserProfile(
            key=self._key,
            secondary=self._secondary,
            ip=self._ip,
            country=self._country,
            custom=dict(self._custom),
        )

    def _set_custom(self, name: str, value: CustomValue) -> None:
        if not isinstance(name, str):
            self._warn(MSG_UNSUPPORTED_CUSTOM.format(name=name, value=value))
            return
        self._custom[name] = value

    def _warn(self, message: str) -> None:
        self.warnings.append(message)
        self._logger.warning(message)
