"""
PanLoadMonitor - Hour Extractor

Lenient parsers for the device supplied timestamp and counter strings.
Malformed input yields a zero value flagged as not ok, never an exception.
"""

from panloadmonitor.models.facts import ParsedValue


HOURS_PER_DAY = 24


def parse_unsigned(raw: str, bits: int = 64) -> ParsedValue:
    """
    Parse an unsigned decimal integer.

    Args:
        raw: Decimal text, no sign or surrounding whitespace allowed
        bits: Width of the target integer; larger values are rejected

    Returns:
        ParsedValue with the number, or 0 and ok=False
    """
    text = raw or ""
    if not text or not text.isascii() or not text.isdigit():
        return ParsedValue(0, ok=False)

    value = int(text)
    if value >= 1 << bits:
        return ParsedValue(0, ok=False)
    return ParsedValue(value)


def extract_hour(raw_timestamp: str) -> ParsedValue:
    """
    Extract the hour of day from a device timestamp.

    The hour is the two characters right before the first ':' so both
    "2023/06/01 14:22:05" and "Thu Jun  1 14:22:05 2023" yield 14.

    Args:
        raw_timestamp: Timestamp text in ...HH:MM:SS form

    Returns:
        ParsedValue with the hour; 0 and ok=False when malformed.
        Hours above 23 keep their value but are flagged not ok.
    """
    fragment = (raw_timestamp or "").split(":", 1)[0]
    parsed = parse_unsigned(fragment[-2:], bits=8)
    if parsed.ok and parsed.value >= HOURS_PER_DAY:
        return ParsedValue(parsed.value, ok=False)
    return parsed
