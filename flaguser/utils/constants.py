"""
Constants for flaguser.

Country lookup rules, warning message templates and the field names of
the serialized profile payload. Builder and lookup code read these rather
than hard-coding literals.
"""


# =============================================================================
# COUNTRY RESOLUTION
# =============================================================================

# ISO codes supplied by callers are matched regardless of case ("us" == "US")
COUNTRY_CODE_CASE_SENSITIVE = False

# Appended to the escaped caller input to build a "starts with" name pattern.
# Names are matched in full, so the input is implicitly anchored at the start.
COUNTRY_NAME_PREFIX_SUFFIX = ".*"

# Lengths accepted by CountryCode.get_by_code()
ALPHA2_LENGTH = 2
ALPHA3_LENGTH = 3


# =============================================================================
# LOG MESSAGES
# =============================================================================

MSG_INVALID_COUNTRY = "Invalid country. Expected valid ISO-3166-1 code: {value}"
MSG_AMBIGUOUS_COUNTRY = (
    "Ambiguous country. Provided code matches multiple countries: {value}"
)
MSG_UNSUPPORTED_CUSTOM = (
    "Unsupported value for custom attribute '{name}': {value!r} "
    "(expected str, number or list of str)"
)
MSG_UNSUPPORTED_ATTRIBUTE = "Ignoring non-string value for '{name}': {value!r}"


# =============================================================================
# PAYLOAD FIELDS
# =============================================================================

FIELD_KEY = "key"
FIELD_SECONDARY = "secondary"
FIELD_IP = "ip"
FIELD_COUNTRY = "country"
FIELD_CUSTOM = "custom"
