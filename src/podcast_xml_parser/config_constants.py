"""Configuration constants for podcast_xml_parser.

Kept apart from config.py so that the parsing modules can import them without
pulling in pydantic or YAML.
"""

# Logging defaults
DEFAULT_LOG_LEVEL = "INFO"
VALID_LOG_LEVELS = {"DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"}
LOG_FORMAT = "%(asctime)s %(levelname)s %(name)s: %(message)s"

# Error messages surfaced to callers
ERROR_EMPTY_INPUT = "Empty XML feed. Please provide valid XML content."
ERROR_FETCH_FAILED = "Failed to fetch the XML feed."
ERROR_MALFORMED_XML = "Unable to parse the XML feed."

# Incomplete feed repair (ranged fetches only)
ITEM_CLOSING_TAG = "</item>"
FEED_CLOSING_TAGS = "</channel></rss>"

# Wrapper used when the input has no leading element
SYNTHETIC_ROOT_TAG = "root"

# HTTP
RANGE_HEADER = "Range"
RANGE_UNIT = "bytes"
FALLBACK_ENCODING = "utf-8"
