"""
Hex quantity decoding for JSON-RPC responses.

Two flavours:
- parse_hex_uint: best-effort, never raises, malformed input decodes to 0
  (used for sync progress fields where a wrong value only skews a distance)
- parse_hex_uint_strict: raises HexParseError (used for block number and
  timestamp, which feed the liveness tracker)
"""

import logging
import re

LOG = logging.getLogger(__name__)

U64_MAX = 2 ** 64 - 1

_HEX_DIGITS_RE = re.compile(r"[0-9a-fA-F]+")


class HexParseError(ValueError):
    pass


def _strip_prefix(text: str) -> str:
    if text[:2] in ("0x", "0X"):
        return text[2:]
    return text


def parse_hex_uint_strict(text: object) -> int:
    if not isinstance(text, str):
        raise HexParseError(f"expected hex string, got {type(text).__name__}")
    digits = _strip_prefix(text)
    if not digits:
        raise HexParseError(f"empty hex value {text!r}")
    if not _HEX_DIGITS_RE.fullmatch(digits):
        raise HexParseError(f"invalid hex value {text!r}")
    value = int(digits, 16)
    if value > U64_MAX:
        raise HexParseError(f"hex value {text!r} overflows uint64")
    return value


def parse_hex_uint(text: object) -> int:
    if text is None or text == "":
        return 0
    if isinstance(text, str) and not _strip_prefix(text).lstrip("0"):
        # "0x", "0x0", "000"
        return 0
    try:
        return parse_hex_uint_strict(text)
    except HexParseError as e:
        LOG.warning("error parsing hex %r: %s. Defaulting to 0.", text, e)
        return 0
