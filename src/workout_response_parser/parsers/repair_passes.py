"""
JSON Repair Passes

Pure ``str -> str`` text transformations that fix the syntax mistakes
generative models make when asked for JSON, plus the helpers used to find
the JSON object inside a response and to close a truncated one.

Each pass is idempotent. ``repair_json`` applies them in order, each one to
the output of the previous, and attempts a full parse after every pass.
"""

import json
import re
from dataclasses import dataclass
from typing import Any, Callable, List, Optional, Sequence, Tuple

from workout_response_parser.errors import SyntaxRepairExhausted

RepairPass = Callable[[str], str]

_STRING_LITERAL_RE = re.compile(r'"(?:[^"\\]|\\.)*"', re.DOTALL)
_ESCAPED_CONTROL_RE = re.compile(r'(?<!\\)\\[nrt]')
_WHITESPACE_RE = re.compile(r'\s+')
_STRUCTURAL_SPACING_RE = re.compile(r'\s*([{}\[\],])\s*')
_TRAILING_COMMA_RE = re.compile(r',(\s*[}\]])')
_BARE_KEY_RE = re.compile(r'([{,]\s*)([A-Za-z_$][\w$-]*)(\s*:)')
_CONTROL_CHAR_RE = re.compile(r'[\x00-\x08\x0b\x0c\x0e-\x1f\x7f-\x9f]')
_BACKSLASH_RE = re.compile(r'\\(["\\/bfnrt]|u[0-9a-fA-F]{4})?')
_MISSING_COLON_RE = re.compile(
    r'([{,]\s*"(?:[^"\\]|\\.)*")\s+(?=["\[{\-\d]|true\b|false\b|null\b)'
)
_BARE_VALUE_RE = re.compile(r'(:\s*)([^\s"{}\[\],:][^"{}\[\],:]*?)(\s*)(?=[,}\]])')
_JSON_NUMBER_RE = re.compile(r'^-?\d+(?:\.\d+)?(?:[eE][+-]?\d+)?$')

_CLOSER_FOR = {"{": "}", "[": "]"}
_OPENER_FOR = {"}": "{", "]": "["}


def map_outside_strings(text: str, fn: Callable[[str], str]) -> str:
    """Apply ``fn`` to every part of ``text`` that is not a string literal."""
    parts = []
    last = 0
    for match in _STRING_LITERAL_RE.finditer(text):
        parts.append(fn(text[last:match.start()]))
        parts.append(match.group(0))
        last = match.end()
    parts.append(fn(text[last:]))
    return "".join(parts)


# ---------------------------------------------------------------------------
# Repair passes, in application order
# ---------------------------------------------------------------------------


def unescape_control_sequences(text: str) -> str:
    """Replace literal \\n, \\t and \\r escape sequences with spaces."""
    return _ESCAPED_CONTROL_RE.sub(" ", text)


def escape_inner_quotes(text: str) -> str:
    """Escape double quotes that appear inside string values.

    A quote inside a string only closes it when the next character on the
    same line is a comma, colon, closing brace/bracket, a line break or the
    end of the text; any other quote is escaped. Well-formed
    ``"key": "value"`` pairs are left untouched.
    """
    out: List[str] = []
    in_string = False
    i = 0
    n = len(text)
    while i < n:
        ch = text[i]
        if not in_string:
            out.append(ch)
            if ch == '"':
                in_string = True
        elif ch == "\\":
            out.append(text[i:i + 2])
            i += 2
            continue
        elif ch == '"':
            j = i + 1
            while j < n and text[j] in " \t":
                j += 1
            if j >= n or text[j] in ",:}]\r\n":
                out.append(ch)
                in_string = False
            else:
                out.append('\\"')
        else:
            out.append(ch)
        i += 1
    return "".join(out)


def convert_single_quotes(text: str) -> str:
    """Turn single-quoted keys and values into double-quoted ones.

    Apostrophes inside double-quoted strings are left alone; double quotes
    inside a single-quoted value are escaped.
    """
    out: List[str] = []
    in_double = False
    i = 0
    n = len(text)
    while i < n:
        ch = text[i]
        if in_double:
            if ch == "\\" and i + 1 < n:
                out.append(text[i:i + 2])
                i += 2
                continue
            if ch == '"':
                in_double = False
            out.append(ch)
            i += 1
            continue

        if ch == '"':
            in_double = True
            out.append(ch)
            i += 1
            continue

        if ch != "'":
            out.append(ch)
            i += 1
            continue

        j = i + 1
        buf: List[str] = []
        while j < n and text[j] != "'":
            c = text[j]
            if c == "\\" and j + 1 < n:
                nxt = text[j + 1]
                buf.append("'" if nxt == "'" else c + nxt)
                j += 2
                continue
            buf.append('\\"' if c == '"' else c)
            j += 1
        if j >= n:
            # Unterminated, keep the rest verbatim
            out.append(text[i:])
            break
        out.append('"' + "".join(buf) + '"')
        i = j + 1
    return "".join(out)


def normalize_whitespace(text: str) -> str:
    """Collapse whitespace runs and drop spacing around braces, brackets and commas.

    Colons are not touched. Raw line breaks inside string values become
    single spaces, which also clears "invalid control character" errors.
    """
    collapsed = _WHITESPACE_RE.sub(" ", text).strip()
    return map_outside_strings(collapsed, lambda seg: _STRUCTURAL_SPACING_RE.sub(r"\1", seg))


def remove_trailing_commas(text: str) -> str:
    """Drop commas directly before a closing brace or bracket."""
    return map_outside_strings(text, lambda seg: _TRAILING_COMMA_RE.sub(r"\1", seg))


def quote_bare_keys(text: str) -> str:
    """Wrap unquoted property names in double quotes."""
    return map_outside_strings(text, lambda seg: _BARE_KEY_RE.sub(r'\1"\2"\3', seg))


def strip_control_characters(text: str) -> str:
    """Remove characters outside the printable range."""
    return _CONTROL_CHAR_RE.sub("", text.replace("\t", " ").replace("\r", " ").replace("\n", " "))


def escape_stray_backslashes(text: str) -> str:
    """Double every backslash that does not start a valid JSON escape."""
    return _BACKSLASH_RE.sub(lambda m: m.group(0) if m.group(1) else "\\\\", text)


def _quote_bare_value(match: "re.Match[str]") -> str:
    token = match.group(2).strip()
    if token in ("true", "false", "null") or _JSON_NUMBER_RE.match(token):
        return match.group(0)
    return f"{match.group(1)}{json.dumps(token)}{match.group(3)}"


def repair_bare_tokens(text: str) -> str:
    """Insert missing colons after quoted keys, then quote unquoted scalar values."""
    with_colons = _MISSING_COLON_RE.sub(r"\1: ", text)
    return map_outside_strings(with_colons, lambda seg: _BARE_VALUE_RE.sub(_quote_bare_value, seg))


REPAIR_PASSES: Tuple[Tuple[str, RepairPass], ...] = (
    ("unescape_control_sequences", unescape_control_sequences),
    ("escape_inner_quotes", escape_inner_quotes),
    ("convert_single_quotes", convert_single_quotes),
    ("normalize_whitespace", normalize_whitespace),
    ("remove_trailing_commas", remove_trailing_commas),
    ("quote_bare_keys", quote_bare_keys),
    ("strip_control_characters", strip_control_characters),
    # Last resorts, these can change meaning
    ("escape_stray_backslashes", escape_stray_backslashes),
    ("repair_bare_tokens", repair_bare_tokens),
)


# ---------------------------------------------------------------------------
# Boundaries and truncation
# ---------------------------------------------------------------------------


@dataclass(frozen=True)
class TruncationInfo:
    """Where a response's JSON stops and what is left after it."""

    content_length: int
    truncation_point: int
    remaining_chars: int
    unmatched: Tuple[str, ...]
    in_string: bool

    @property
    def truncation_percentage(self) -> int:
        if not self.content_length:
            return 0
        return round(self.remaining_chars / self.content_length * 100)


def find_json_boundaries(text: str) -> Optional[Tuple[int, int]]:
    """Return (first '{', last '}') or None when absent or inverted."""
    first = text.find("{")
    last = text.rfind("}")
    if first == -1 or last == -1 or first >= last:
        return None
    return first, last


def scan_unmatched(text: str) -> Tuple[List[str], bool]:
    """Return the unclosed '{'/'[' openers (outside strings) and whether text ends inside a string."""
    stack: List[str] = []
    in_string = False
    escaped = False
    for ch in text:
        if in_string:
            if escaped:
                escaped = False
            elif ch == "\\":
                escaped = True
            elif ch == '"':
                in_string = False
            continue
        if ch == '"':
            in_string = True
        elif ch in _CLOSER_FOR:
            stack.append(ch)
        elif ch in _OPENER_FOR and stack and stack[-1] == _OPENER_FOR[ch]:
            stack.pop()
    return stack, in_string


def detect_truncation(text: str, threshold: int) -> Optional[TruncationInfo]:
    """
    Decide whether a response's JSON object was cut short.

    The object counts as truncated when more than ``threshold`` characters
    follow the last closing brace, or when the brace-bounded slice still has
    unclosed braces or brackets.
    """
    bounds = find_json_boundaries(text)
    if bounds is None:
        return None
    first, last = bounds
    remaining = len(text) - last - 1
    unmatched, in_string = scan_unmatched(text[first:last + 1])
    if remaining <= threshold and not unmatched:
        return None
    return TruncationInfo(
        content_length=len(text),
        truncation_point=last,
        remaining_chars=remaining,
        unmatched=tuple(unmatched),
        in_string=in_string,
    )


def complete_truncated(fragment: str) -> str:
    """Close every unclosed string, object and array at the end of ``fragment``."""
    unmatched, in_string = scan_unmatched(fragment)
    completed = fragment.rstrip()
    if in_string:
        completed += '"'
    completed = re.sub(r",\s*$", "", completed)
    return completed + "".join(_CLOSER_FOR[c] for c in reversed(unmatched))


# ---------------------------------------------------------------------------
# Parsing
# ---------------------------------------------------------------------------


def error_window(text: str, position: Optional[int], radius: int = 50) -> str:
    """Return up to ``radius`` characters either side of ``position``."""
    if position is None:
        return text[: radius * 2]
    start = max(0, position - radius)
    return text[start:position + radius]


def repair_json(
    text: str,
    passes: Sequence[Tuple[str, RepairPass]] = REPAIR_PASSES,
    on_pass: Optional[Callable[[str, bool], None]] = None,
    context_chars: int = 50,
) -> Any:
    """
    Run the repair passes over ``text`` until one produces parseable JSON.

    Args:
        text: JSON-like text, usually a brace-bounded slice
        passes: Ordered (name, pass) pairs
        on_pass: Called with (pass name, parsed?) after every attempt
        context_chars: Characters kept either side of the last error position

    Returns:
        The decoded JSON value

    Raises:
        SyntaxRepairExhausted: If no pass produced parseable text
    """
    candidate = text
    last_error: Optional[json.JSONDecodeError] = None

    for name, repair in passes:
        candidate = repair(candidate)
        try:
            value = json.loads(candidate)
        except json.JSONDecodeError as e:
            last_error = e
            if on_pass:
                on_pass(name, False)
            continue
        if on_pass:
            on_pass(name, True)
        return value

    position = last_error.pos if last_error else None
    reason = last_error.msg if last_error else "no repair passes configured"
    raise SyntaxRepairExhausted(
        f"JSON repair exhausted after {len(passes)} passes: {reason} at position {position}",
        position=position,
        context_window=error_window(candidate, position, context_chars),
        passes_attempted=len(passes),
    )
