"""
DOCX Text Replacer: in-place text substitution inside word/document.xml.
Keeps every paragraph and run property (fonts, sizes, colors, spacing) exactly
as the source document had it. Only the visible text of <w:t> nodes changes.

Approach:
1. Escape original + replacement for XML (& < > " ')
2. Fast path: original sits inside a single <w:t> node → substitute it there
3. Slow path: original spans several <w:t> nodes (formatting changes mid-phrase)
   → write the full replacement into the first node, blank the others
4. No match → body returned untouched
"""

import html
import logging
import re
from dataclasses import dataclass
from typing import List, Optional, Tuple
from xml.sax.saxutils import escape

logger = logging.getLogger(__name__)

# <w:t> and <w:t xml:space="preserve">, never <w:tab/>, <w:tbl>, <w:tc>, <w:tr> or a self-closing <w:t/>
TEXT_NODE_RE = re.compile(r"<w:t((?:\s[^>]*)?)(?<!/)>([^<]*)</w:t>")

_EXTRA_ENTITIES = {'"': "&quot;", "'": "&apos;"}


# ─── Data classes ───────────────────────────────────────────────────────────

@dataclass
class TextNode:
    """One <w:t> element located in the serialized body."""
    start: int       # offset of "<w:t" in the body
    end: int         # offset just past "</w:t>"
    attrs: str       # ' xml:space="preserve"' or ""
    raw: str         # content as stored (escaped)
    text: str        # visible content (unescaped)

    def render(self, raw: str) -> str:
        return f"<w:t{self.attrs}>{raw}</w:t>"


@dataclass
class TextSpan:
    """Inclusive range of text nodes covering one match of the visible text."""
    start_node: int
    end_node: int
    start_offset: int
    end_offset: int


# ─── Helpers ────────────────────────────────────────────────────────────────

def escape_xml(text: str) -> str:
    return escape(text, _EXTRA_ENTITIES)


def unescape_xml(text: str) -> str:
    return html.unescape(text)


def find_text_nodes(xml: str) -> List[TextNode]:
    """All <w:t> nodes of the body, in document order."""
    return [
        TextNode(
            start=m.start(),
            end=m.end(),
            attrs=m.group(1),
            raw=m.group(2),
            text=unescape_xml(m.group(2)),
        )
        for m in TEXT_NODE_RE.finditer(xml)
    ]


def extract_visible_text(xml: str) -> str:
    """Concatenated visible text of every <w:t> node, no separators."""
    return "".join(node.text for node in find_text_nodes(xml))


def locate_text_span(nodes: List[TextNode], original: str) -> Optional[TextSpan]:
    """
    Find the first occurrence of `original` in the concatenated node text and
    map its start/end offsets back onto node indices.
    Offsets are counted on unescaped text.
    """
    full_text = "".join(node.text for node in nodes)
    start_offset = full_text.find(original)
    if start_offset == -1:
        return None
    end_offset = start_offset + len(original)

    char_count = 0
    start_node = None
    end_node = None
    for i, node in enumerate(nodes):
        node_len = len(node.text)
        if start_node is None and char_count + node_len > start_offset:
            start_node = i
        if char_count + node_len >= end_offset:
            end_node = i
            break
        char_count += node_len

    if start_node is None or end_node is None:
        return None
    return TextSpan(start_node, end_node, start_offset, end_offset)


def _splice(xml: str, edits: List[Tuple[TextNode, str]]) -> str:
    """Rebuild the body with each node's element swapped for its new markup."""
    parts = []
    cursor = 0
    for node, rendered in sorted(edits, key=lambda e: e[0].start):
        parts.append(xml[cursor:node.start])
        parts.append(rendered)
        cursor = node.end
    parts.append(xml[cursor:])
    return "".join(parts)


# ─── Public API ─────────────────────────────────────────────────────────────

def replace_in_xml(xml: str, original: str, replacement: str) -> str:
    """
    Replace the first occurrence of `original` visible text with `replacement`.

    Returns the same string when `original` is empty or cannot be found.
    When the match spans several nodes, the first node's whole text is
    overwritten and every other overlapping node is blanked, so untouched
    text sharing the boundary nodes is dropped.
    """
    if not original:
        return xml

    original_escaped = escape_xml(original)
    replacement_escaped = escape_xml(replacement)
    nodes = find_text_nodes(xml)

    # Fast path: whole original inside one node
    for node in nodes:
        if original_escaped in node.raw:
            new_raw = node.raw.replace(original_escaped, replacement_escaped, 1)
            return _splice(xml, [(node, node.render(new_raw))])
        if original in node.text:
            # Same text, escaped differently in the source (e.g. a literal apostrophe)
            new_raw = escape_xml(node.text.replace(original, replacement, 1))
            return _splice(xml, [(node, node.render(new_raw))])

    # Slow path: original split across runs
    span = locate_text_span(nodes, original)
    if span is None:
        logger.info(f"[REPLACE] No match for: {original[:60]!r}")
        return xml

    logger.info(
        f"[REPLACE] Cross-run match over nodes {span.start_node}-{span.end_node} "
        f"for: {original[:60]!r}"
    )
    edits = [(nodes[span.start_node], f'<w:t xml:space="preserve">{replacement_escaped}</w:t>')]
    for node in nodes[span.start_node + 1:span.end_node + 1]:
        edits.append((node, node.render("")))
    return _splice(xml, edits)
