"""Normalisation of raw model output.

Models asked for "only HTML" still sometimes wrap their answer in a Markdown
code fence or return a bare fragment.  :func:`normalize_html` turns either
into a standalone document:

1. Trim surrounding whitespace.
2. Drop a leading fence (```` ``` ```` or ```` ```html ````, any language tag)
   and a trailing fence.  Either may be missing.
3. If the remainder has neither ``<!doctype`` nor ``<html`` in it
   (case-insensitive), wrap it in :data:`_DOCUMENT_SHELL`.

The function is deterministic but not idempotent by contract; it is applied
exactly once per response.
"""

from __future__ import annotations

import re

_LEADING_FENCE = re.compile(r"^```[ \t]*[\w+-]*[ \t]*\n?")
_TRAILING_FENCE = re.compile(r"\n?```$")

_DOCUMENT_SHELL = """<!DOCTYPE html>
<html lang="en">
<head>
    <meta charset="UTF-8">
    <meta name="viewport" content="width=device-width, initial-scale=1.0">
    <title>Generated UI</title>
</head>
<body>
{body}
</body>
</html>"""


def strip_code_fences(text: str) -> str:
    """Remove one leading and one trailing Markdown fence from *text*.

    Args:
        text: Raw model output.

    Returns:
        The trimmed text without fence markers.
    """
    cleaned = text.strip()
    cleaned = _LEADING_FENCE.sub("", cleaned, count=1)
    cleaned = _TRAILING_FENCE.sub("", cleaned, count=1)
    return cleaned.strip()


def is_html_document(text: str) -> bool:
    """Return ``True`` when *text* already carries document scaffolding."""
    lowered = text.lower()
    return "<!doctype" in lowered or "<html" in lowered


def normalize_html(text: str) -> str:
    """Turn raw model output into a renderable standalone HTML document.

    Args:
        text: Raw output of the code-synthesis model.

    Returns:
        Unfenced HTML; wrapped in a minimal document shell when the model
        returned only a fragment.
    """
    cleaned = strip_code_fences(text)
    if not is_html_document(cleaned):
        cleaned = _DOCUMENT_SHELL.format(body=cleaned)
    return cleaned
