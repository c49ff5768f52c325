"""HTTP fetching of podcast feeds.

The first fetch raises the ``urllib3`` loggers to WARNING when the root logger is
at DEBUG. This changes process-wide logging state once; callers that want
urllib3 debug output can lower those loggers again afterwards.
"""

from __future__ import annotations

import logging
from typing import cast, Optional, Union

import requests
from pydantic import AnyUrl
from requests.structures import CaseInsensitiveDict
from requests.utils import get_encoding_from_headers, requote_uri

from . import config_constants, repair
from .config import FetchConfig
from .exceptions import FetchFailedError

logger = logging.getLogger(__name__)

HTTP_SUCCESS_MIN = 200
HTTP_SUCCESS_MAX = 299

# Track if we've suppressed urllib3 logs (lazy initialization)
_urllib3_logs_suppressed = False


def _suppress_urllib3_debug_logs() -> None:
    """Keep urllib3 connection chatter out of DEBUG output.

    Called lazily on first fetch so the root logger is already configured by
    then.
    """
    global _urllib3_logs_suppressed
    if _urllib3_logs_suppressed:
        return

    root_logger = logging.getLogger()
    root_level = root_logger.level if root_logger.level else logging.INFO
    if root_level <= logging.DEBUG:
        for logger_name in ("urllib3", "urllib3.connectionpool", "urllib3.connection"):
            logging.getLogger(logger_name).setLevel(logging.WARNING)

    _urllib3_logs_suppressed = True


def normalize_url(url: str) -> str:
    """Normalize URLs while preserving already-encoded segments."""
    normalized = requote_uri(url)
    if normalized != url:
        logger.debug("Normalized URL %s -> %s", url, normalized)
    return cast(str, normalized)


def build_request_headers(cfg: FetchConfig) -> CaseInsensitiveDict:
    """Merge the configured headers with the ``Range`` header, if any.

    ``request_size`` overrides any ``Range`` header passed explicitly.
    """
    headers: CaseInsensitiveDict = CaseInsensitiveDict(cfg.request_headers)
    if cfg.request_size:
        headers[config_constants.RANGE_HEADER] = (
            f"{config_constants.RANGE_UNIT}=0-{cfg.request_size}"
        )
    return headers


def _decode_body(resp: requests.Response) -> str:
    """Decode a response body to text.

    The charset is honoured only when the server states one. Otherwise UTF-8
    is assumed instead of the ISO-8859-1 default requests applies to ``text/*``
    types, and undecodable bytes (e.g. a multi-byte character cut by a range
    request) become replacement characters.
    """
    content_type = resp.headers.get("Content-Type", "") or ""
    if "charset=" in content_type.lower():
        charset = get_encoding_from_headers(resp.headers)
        if charset:
            try:
                return resp.content.decode(charset, errors="replace")
            except LookupError:
                logger.debug("Unknown charset %r; decoding as UTF-8", charset)
    return resp.content.decode(config_constants.FALLBACK_ENCODING, errors="replace")


def fetch_feed(
    url: Union[str, AnyUrl],
    config: Optional[FetchConfig] = None,
    *,
    session: Optional[requests.Session] = None,
) -> str:
    """Fetch a feed and return its body as text.

    One GET request, no retries. When ``config.request_size`` is set, a
    ``Range: bytes=0-N`` header is sent and the returned text is passed
    through ``repair.repair_ranged_body`` so it ends on a complete item, or on
    a closed channel header when no item arrived in full.

    Args:
        url: Feed URL as a string or pydantic URL
        config: Fetch options; defaults to ``FetchConfig()``
        session: Optional session to send the request with. A fresh session is
            created and closed when omitted.

    Returns:
        Response body text

    Raises:
        FetchFailedError: If the server answers with a non-success status
        requests.RequestException: On transport failure, propagated unchanged
    """
    cfg = config or FetchConfig()
    _suppress_urllib3_debug_logs()

    target = normalize_url(str(url))
    headers = build_request_headers(cfg)
    owns_session = session is None
    http = session if session is not None else requests.Session()
    try:
        logger.debug(
            "Fetching feed %s (range=%s, timeout=%s, extra headers=%d)",
            target,
            headers.get(config_constants.RANGE_HEADER),
            cfg.timeout,
            len(cfg.request_headers),
        )
        resp = http.get(target, headers=headers, timeout=cfg.timeout)
        try:
            if not HTTP_SUCCESS_MIN <= resp.status_code <= HTTP_SUCCESS_MAX:
                logger.warning(
                    "Feed request to %s failed with status %s %s",
                    target,
                    resp.status_code,
                    resp.reason,
                )
                raise FetchFailedError()
            text = _decode_body(resp)
        finally:
            resp.close()
    finally:
        if owns_session:
            http.close()

    logger.debug("Fetched %d characters from %s", len(text), target)
    if cfg.request_size:
        text = repair.repair_ranged_body(text)
    return text
