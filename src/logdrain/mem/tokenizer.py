import re
from typing import Iterator, Sequence

from logdrain.config import DEFAULT_DELIMITERS


WILDCARD = "*"

# Decimal float grammar: sign, digits with optional fraction (or ".5"),
# optional exponent, or inf/infinity/nan. ASCII only, no "_" separators.
_NUMBER_RE = re.compile(
    r"[+-]?(?:inf|infinity|nan|(?:\d+\.?\d*|\.\d+)(?:e[+-]?\d+)?)",
    re.IGNORECASE | re.ASCII,
)

_SPLIT_CACHE = {}


def _split_re(delimiters: Sequence[str]) -> "re.Pattern[str]":
    key = tuple(delimiters)
    rx = _SPLIT_CACHE.get(key)
    if rx is None:
        rx = re.compile("[" + "".join(re.escape(d) for d in key) + "]")
        _SPLIT_CACHE[key] = rx
    return rx


def tokenize(line: str, delimiters: Sequence[str] = DEFAULT_DELIMITERS) -> Iterator[str]:
    """
    Yield the non-empty fragments of `line` split on any delimiter character.
    Surrounding whitespace is stripped first.
    """
    for tok in _split_re(delimiters).split(line.strip()):
        if tok:
            yield tok


def is_number(token: str) -> bool:
    return _NUMBER_RE.fullmatch(token) is not None


def signature(first_token: str) -> str:
    """
    Cluster key for a line: numeric-looking first tokens all collapse to "*".
    """
    return WILDCARD if is_number(first_token) else first_token
