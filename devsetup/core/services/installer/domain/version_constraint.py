"""
L1 Domain — Version parsing and comparison (pure).

Versions are compared component-wise as integer tuples, never as
strings, so "3.9" < "3.12". No I/O, no subprocess.
"""

from __future__ import annotations

import re

_VERSION_RE = re.compile(r"v?(\d+(?:\.\d+)*)")


def parse_version(text: str) -> tuple[int, ...] | None:
    """Extract the first dotted version number from ``text``.

    Accepts bare versions (``"3.12"``) and tool output
    (``"Python 3.12.4"``, ``"v20.11.0"``). Returns None when the text
    holds no version.
    """
    match = _VERSION_RE.search(text or "")
    if not match:
        return None
    return tuple(int(part) for part in match.group(1).split("."))


def version_at_least(actual: str, minimum: str) -> bool:
    """Whether ``actual`` is ``minimum`` or newer.

    Missing components count as zero, so "3.12" satisfies "3.12.0".
    Unparseable input never satisfies a minimum.
    """
    have = parse_version(actual)
    want = parse_version(minimum)
    if have is None or want is None:
        return False
    width = max(len(have), len(want))
    have = have + (0,) * (width - len(have))
    want = want + (0,) * (width - len(want))
    return have >= want


def latest_matching(candidates: list[str], series: str) -> str | None:
    """Newest version in ``candidates`` that belongs to ``series``.

    ``series`` is a prefix such as ``"3.12"``; ``"3.12.4"`` matches,
    ``"3.120.0"`` and ``"3.12.0rc1"`` do not. Candidates may carry
    surrounding whitespace (``pyenv install --list`` indents them).
    """
    pattern = re.compile(rf"^{re.escape(series)}\.\d+$")
    matches = [c.strip() for c in candidates if pattern.match(c.strip())]
    if not matches:
        return None
    return max(matches, key=lambda v: parse_version(v) or ())
