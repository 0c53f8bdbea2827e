"""Text specifier parsing.

Selector engines such as ``internal:text`` or ``internal:has-text`` carry a
text body in one of these forms, tried in order:

    /Sign\\s+in/i     regular expression
    "Sign in"s        exact, case-sensitive
    "Sign in"i        case-insensitive (compiled to an escaped regex)
    "Sign in"         plain text
    Sign in           plain text (raw)
"""

import json
import re
from typing import Optional

from ..scenario.models import ExactText, PlainText, RegexText, TextMatcher

_REGEX_LITERAL_RE = re.compile(r"^/([\s\S]*)/([dgimsuyv]*)\Z")
_REGEX_SPECIAL_RE = re.compile(r"([.*+?^${}()|\[\]\\])")

# Canonical flag order, as regex engines report them
_FLAG_ORDER = "dgimsuvy"
_PYTHON_FLAGS = {"i": re.IGNORECASE, "m": re.MULTILINE, "s": re.DOTALL}


def escape_regex(text: str) -> str:
    """Escape regex metacharacters for literal matching."""
    return _REGEX_SPECIAL_RE.sub(r"\\\1", text)


def compile_regex(pattern: str, flags: str = "") -> re.Pattern:
    """Compile a pattern with regex-literal flags.

    Raises:
        re.error: If the pattern is invalid or a flag is repeated
    """
    if len(set(flags)) != len(flags):
        raise re.error(f"duplicate flags in {flags!r}")
    if "u" in flags and "v" in flags:
        raise re.error("flags 'u' and 'v' are mutually exclusive")
    py_flags = 0
    for flag in flags:
        py_flags |= _PYTHON_FLAGS.get(flag, 0)
    return re.compile(pattern, py_flags)


def _normalize_flags(flags: str) -> str:
    return "".join(f for f in _FLAG_ORDER if f in flags)


def _parse_json_string(quoted: str) -> Optional[str]:
    try:
        value = json.loads(quoted)
    except ValueError:
        return None
    return value if isinstance(value, str) else None


def parse_text_matcher(spec: Optional[str]) -> Optional[TextMatcher]:
    """Parse a raw text specifier into a TextMatcher.

    Malformed regex or JSON literals fall through to the next form; the
    last resort is the raw input as plain text.

    Args:
        spec: Raw text body, e.g. ``"Submit"i``

    Returns:
        TextMatcher, or None when spec is empty
    """
    if not spec:
        return None

    match = _REGEX_LITERAL_RE.match(spec)
    if match:
        body, flags = match.group(1), match.group(2)
        try:
            compile_regex(body, flags)
        except re.error:
            pass
        else:
            return RegexText(pattern=body, flags=_normalize_flags(flags))

    if spec.endswith('"s') or spec.endswith('"i'):
        suffix = spec[-1]
        quoted = spec[:-1]
        if len(quoted) > 1 and quoted.startswith('"') and quoted.endswith('"'):
            decoded = _parse_json_string(quoted)
            if decoded is not None:
                if suffix == "s":
                    return ExactText(value=decoded, case_sensitive=True)
                return RegexText(pattern=escape_regex(decoded), flags="i")

    if len(spec) > 1 and spec.startswith('"') and spec.endswith('"'):
        decoded = _parse_json_string(spec)
        if decoded is not None:
            return PlainText(decoded)

    return PlainText(spec)
