"""S-expression parser for KiCad files.

Both ``.kicad_pcb`` and ``.kicad_sch`` documents share the same outer grammar,
so this module knows nothing about KiCad semantics. The result is a plain
nested structure where each node is either:

- A string (quoted string or unquoted atom)
- A number (int or float)
- A list (compound expression, by convention tagged by its first atom)
"""

from __future__ import annotations

import re
from typing import NamedTuple, Optional, Union

from pcb_review.models.errors import SExprParseError, UnclosedListError, UnclosedStringError

SExpr = Union[str, int, float, list]

INT_PATTERN = re.compile(r"[+-]?\d+")
FLOAT_PATTERN = re.compile(r"[+-]?(?:\d+\.\d*|\.\d+)(?:[eE][+-]?\d+)?")
# Atoms printed without quotes by dumps(); they can never re-parse as numbers.
BARE_ATOM_PATTERN = re.compile(r"[A-Za-z_][A-Za-z0-9_]*")


class _Token(NamedTuple):
    kind: str  # "(", ")", "string" or "atom"
    text: str
    offset: int


def parse_sexp(content: str) -> Optional[SExpr]:
    """Parse S-expression text into a nested list structure.

    Only the first top-level expression is returned; KiCad files hold exactly
    one. Whitespace-only input yields ``None``.

    Raises:
        UnclosedListError: Input ended before a ``(`` was closed.
        UnclosedStringError: Input ended inside a quoted string.
        SExprParseError: A ``)`` appeared with no list open.
    """
    tokens = _tokenize(content)
    if not tokens:
        return None
    result, _ = _parse_tokens(tokens, 0)
    return result


def _tokenize(content: str) -> list[_Token]:
    """Tokenize an S-expression string."""
    tokens: list[_Token] = []
    i = 0
    length = len(content)

    while i < length:
        ch = content[i]

        if ch.isspace():
            i += 1
            continue

        if ch == "(" or ch == ")":
            tokens.append(_Token(ch, ch, i))
            i += 1
            continue

        if ch == '"':
            # Quoted string; a backslash takes the next character literally
            chars: list[str] = []
            j = i + 1
            while j < length:
                if content[j] == "\\" and j + 1 < length:
                    chars.append(content[j + 1])
                    j += 2
                    continue
                if content[j] == '"':
                    break
                chars.append(content[j])
                j += 1
            else:
                raise UnclosedStringError(
                    "Unexpected end of input - unclosed quoted string",
                    {"offset": i},
                )
            tokens.append(_Token("string", "".join(chars), i))
            i = j + 1
            continue

        # Unquoted atom
        j = i
        while j < length and not content[j].isspace() and content[j] not in ("(", ")", '"'):
            j += 1
        tokens.append(_Token("atom", content[i:j], i))
        i = j

    return tokens


def _parse_tokens(tokens: list[_Token], pos: int) -> tuple[SExpr, int]:
    """Parse tokens starting at position, returning (result, new_position)."""
    token = tokens[pos]

    if token.kind == "(":
        result: list[SExpr] = []
        pos += 1
        while pos < len(tokens) and tokens[pos].kind != ")":
            item, pos = _parse_tokens(tokens, pos)
            result.append(item)
        if pos >= len(tokens):
            raise UnclosedListError(
                "Unexpected end of input - unclosed list",
                {"offset": token.offset},
            )
        return result, pos + 1

    if token.kind == ")":
        raise SExprParseError(
            "Unexpected ')' with no open list",
            {"offset": token.offset},
        )

    if token.kind == "string":
        return token.text, pos + 1

    return convert_atom(token.text), pos + 1


def convert_atom(text: str) -> SExpr:
    """Classify an unquoted atom as int, float or string.

    The whole atom must be numeric: ``"3"`` is 3, ``"3.0"`` is 3.0 and
    ``"3.5abc"`` stays a string.
    """
    if "." in text:
        if FLOAT_PATTERN.fullmatch(text):
            return float(text)
    elif INT_PATTERN.fullmatch(text):
        return int(text)
    return text


# ---------------------------------------------------------------------------
# Tree helpers shared by the PCB and schematic extractors
# ---------------------------------------------------------------------------


def tag_of(node: SExpr) -> str:
    """First atom of a list node when it is a string, else ``""``."""
    if isinstance(node, list) and node and isinstance(node[0], str):
        return node[0]
    return ""


def to_float(value: SExpr | None, default: float = 0.0) -> float:
    """Coerce an atom to float, falling back to *default*.

    A missing field and a field literally equal to zero are indistinguishable
    to callers using the default of 0.
    """
    if isinstance(value, bool) or value is None:
        return default
    if isinstance(value, (int, float)):
        return float(value)
    if isinstance(value, str):
        converted = convert_atom(value.strip())
        if isinstance(converted, (int, float)):
            return float(converted)
    return default


def to_int(value: SExpr | None, default: int = 0) -> int:
    """Coerce an atom to int (truncating floats), falling back to *default*."""
    if isinstance(value, bool) or value is None:
        return default
    if isinstance(value, int):
        return value
    if isinstance(value, float):
        return int(value)
    if isinstance(value, str):
        converted = convert_atom(value.strip())
        if isinstance(converted, (int, float)):
            return int(converted)
    return default


def atom_str(value: SExpr | None) -> str:
    """String form of an atom, matching how numbers print in KiCad files."""
    if value is None or isinstance(value, list):
        return ""
    if isinstance(value, float) and value.is_integer():
        return str(int(value))
    return str(value)


def find_elements(node: SExpr, tag: str) -> list[list]:
    """Find all lists tagged *tag* anywhere in the tree, including *node* itself."""
    results: list[list] = []
    if isinstance(node, list) and node:
        if node[0] == tag:
            results.append(node)
        for item in node:
            if isinstance(item, list):
                results.extend(find_elements(item, tag))
    return results


def get_value(node: list, tag: str) -> SExpr | None:
    """Get the first value of a direct child like ``(tag value)``."""
    for item in node:
        if isinstance(item, list) and len(item) >= 2 and item[0] == tag:
            return item[1]
    return None


def get_property(node: list, name: str) -> str | None:
    """Get a ``(property "Name" "value" ...)`` value from a symbol or footprint."""
    for item in node:
        if isinstance(item, list) and len(item) >= 3 and item[0] == "property" and item[1] == name:
            return atom_str(item[2])
    return None


def get_xy(node: list) -> tuple[float, float, float | None]:
    """Extract ``(x, y, rotation)`` from the first ``(at x y [rot])`` child."""
    for item in node:
        if isinstance(item, list) and len(item) >= 3 and item[0] == "at":
            rotation = to_float(item[3]) if len(item) > 3 else None
            return to_float(item[1]), to_float(item[2]), rotation
    return 0.0, 0.0, None


# ---------------------------------------------------------------------------
# Printer
# ---------------------------------------------------------------------------


def dumps(value: SExpr) -> str:
    """Serialize a parsed tree back to S-expression text.

    Re-parsing the output yields an equal tree: strings stay strings (quoted
    unless they are plain identifiers), ints stay ints and floats stay floats.
    """
    if isinstance(value, list):
        return "(" + " ".join(dumps(item) for item in value) + ")"
    if isinstance(value, bool):
        raise TypeError("booleans have no S-expression form")
    if isinstance(value, int):
        return str(value)
    if isinstance(value, float):
        return _format_float(value)
    if isinstance(value, str):
        if BARE_ATOM_PATTERN.fullmatch(value):
            return value
        escaped = value.replace("\\", "\\\\").replace('"', '\\"')
        return f'"{escaped}"'
    raise TypeError(f"Cannot serialize {type(value).__name__} as S-expression")


def _format_float(value: float) -> str:
    text = repr(value)
    if "." in text:
        return text
    if "e" in text:
        mantissa, exponent = text.split("e")
        return f"{mantissa}.0e{exponent}"
    # inf/nan never come out of the parser
    raise ValueError(f"Cannot serialize non-finite float {value!r}")
