"""
Readable previews of textual parts.

OOXML writers emit each part as one long line. Well-formed parts are
re-indented through lxml; parts lxml rejects are split tag by tag so that
even truncated or hand-edited XML stays readable.
"""

import logging
import re

from lxml import etree

from ooxmlviewer.inspector.data_types import ArchiveEntry

logger = logging.getLogger(__name__)

INDENT = "  "

BINARY_PLACEHOLDER = "Binary part - preview disabled."
EMPTY_PLACEHOLDER = "(empty file)"

_DECLARATION = re.compile(r"^\s*(<\?xml\b[^>]*\?>)")


def _make_parser() -> etree.XMLParser:
    # lxml parsers must not be shared between threads
    return etree.XMLParser(
        remove_blank_text=True,
        resolve_entities=False,
        no_network=True,
        huge_tree=True,
    )


def looks_like_xml(text: str) -> bool:
    trimmed = text.strip()
    return trimmed.startswith("<") and trimmed.endswith(">")


def _format_with_lxml(text: str) -> str:
    declaration = _DECLARATION.match(text)
    body = text[declaration.end() :] if declaration else text

    root = etree.fromstring(body.strip().encode("utf-8"), parser=_make_parser())
    tree = root.getroottree()
    etree.indent(tree, space=INDENT)
    formatted = etree.tostring(tree, encoding="unicode")

    if declaration:
        return f"{declaration.group(1)}\n{formatted}"
    return formatted


def _format_tokens(text: str) -> str:
    normalized = re.sub(r"\r\n?", "\n", text)
    normalized = re.sub(r">\s+<", "><", normalized)
    normalized = normalized.replace("<", "\n<").replace(">", ">\n")

    tokens = [segment.strip() for segment in normalized.split("\n")]
    level = 0
    lines = []

    for segment in tokens:
        if not segment:
            continue

        if segment.startswith(("<?", "<!")):
            lines.append(INDENT * level + segment)
        elif segment.startswith("</"):
            level = max(level - 1, 0)
            lines.append(INDENT * level + segment)
        elif segment.startswith("<"):
            lines.append(INDENT * level + segment)
            if not segment.endswith("/>"):
                level += 1
        else:
            lines.append(INDENT * level + segment)

    return "\n".join(lines)


def format_xml(text: str) -> str:
    """
    Pretty print XML text with two space indentation.

    A leading XML declaration is kept verbatim. Input that does not parse
    is formatted token by token instead of being rejected.
    """
    try:
        return _format_with_lxml(text)
    except (etree.XMLSyntaxError, ValueError) as exc:
        logger.debug(f"Falling back to token formatting: {exc}")
        return _format_tokens(text)


def preview_part(entry: ArchiveEntry) -> str:
    """Text shown for a single part of the archive."""
    if entry.is_dir:
        raise ValueError(f"Cannot preview directory entry: {entry.path}")

    if entry.content is None:
        return BINARY_PLACEHOLDER

    trimmed = entry.content.lstrip("\ufeff").strip()
    if not trimmed:
        return EMPTY_PLACEHOLDER

    if looks_like_xml(trimmed):
        return format_xml(trimmed)
    return trimmed
