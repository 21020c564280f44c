"""HTML to markdown conversion for issue bodies.

Covers the markup found in feed item content: headings, paragraphs, emphasis,
links, images, lists, block quotes and code. Anything else is reduced to its
text.
"""

from __future__ import annotations

import re
from typing import List

from bs4 import BeautifulSoup, Comment, NavigableString, Tag
from bs4.element import Declaration, Doctype, ProcessingInstruction

_whitespace_re = re.compile(r"\s+")
_blank_lines_re = re.compile(r"\n{3,}")
_leading_space_re = re.compile(r"^ (?=\S)")
_markdown_special_re = re.compile(r"([\\`*_\[\]])")

_DROP_TAGS = ["script", "style", "noscript", "template"]
_BLOCK_TAGS = {
    "p", "div", "section", "article", "header", "footer", "main", "aside",
    "figure", "figcaption", "table", "thead", "tbody", "tr", "dl", "dd", "dt",
}
_SKIPPED_STRINGS = (Comment, Declaration, Doctype, ProcessingInstruction)


class ConversionError(Exception):
    """Raised when HTML content cannot be converted to markdown."""


def _block(text: str) -> str:
    text = text.strip()
    return f"\n\n{text}\n\n" if text else ""


def _wrap(marker: str, text: str) -> str:
    inner = text.strip()
    return f"{marker}{inner}{marker}" if inner else ""


def _render_children(tag: Tag) -> str:
    return "".join(_render(child) for child in tag.children)


def _render_list(tag: Tag) -> str:
    ordered = tag.name == "ol"
    try:
        start = int(tag.get("start", 1))
    except (TypeError, ValueError):
        start = 1
    items: List[str] = []
    for index, li in enumerate(tag.find_all("li", recursive=False)):
        prefix = f"{start + index}. " if ordered else "- "
        content = re.sub(r"\n+", "\n", _render_children(li).strip())
        indent = " " * len(prefix)
        lines = content.split("\n")
        items.append(prefix + "\n".join([lines[0]] + [indent + line for line in lines[1:]]))
    return _block("\n".join(items))


def _render(node) -> str:
    if isinstance(node, _SKIPPED_STRINGS):
        return ""
    if isinstance(node, NavigableString):
        # Literal markdown characters in text must not turn into markup
        return _markdown_special_re.sub(r"\\\1", _whitespace_re.sub(" ", str(node)))
    if not isinstance(node, Tag):
        return ""

    name = node.name
    if name in ("h1", "h2", "h3", "h4", "h5", "h6"):
        text = _whitespace_re.sub(" ", _render_children(node)).strip()
        return _block(f"{'#' * int(name[1])} {text}") if text else ""
    if name in _BLOCK_TAGS:
        return _block(_render_children(node))
    if name == "br":
        return "\n"
    if name == "hr":
        return "\n\n* * *\n\n"
    if name in ("strong", "b"):
        return _wrap("**", _render_children(node))
    if name in ("em", "i"):
        return _wrap("_", _render_children(node))
    if name in ("del", "s", "strike"):
        return _wrap("~~", _render_children(node))
    if name == "code":
        return _wrap("`", node.get_text())
    if name == "pre":
        code = node.get_text().strip("\n")
        return f"\n\n```\n{code}\n```\n\n" if code else ""
    if name == "a":
        text = _render_children(node).strip()
        href = (node.get("href") or "").strip()
        if not href:
            return text
        return f"[{text}]({href})" if text else ""
    if name == "img":
        src = (node.get("src") or "").strip()
        return f"![{(node.get('alt') or '').strip()}]({src})" if src else ""
    if name in ("ul", "ol"):
        return _render_list(node)
    if name == "blockquote":
        inner = _render_children(node).strip()
        quoted = "\n".join(f"> {line}".rstrip() for line in _blank_lines_re.sub("\n\n", inner).split("\n"))
        return _block(quoted)
    if name in ("td", "th"):
        return _render_children(node).strip() + " "
    return _render_children(node)


def _tidy(markdown: str) -> str:
    lines: List[str] = []
    in_fence = False
    for line in markdown.split("\n"):
        if line.startswith("```"):
            in_fence = not in_fence
            lines.append(line)
            continue
        if in_fence:
            lines.append(line)
            continue
        lines.append(_leading_space_re.sub("", line.rstrip()))
    return _blank_lines_re.sub("\n\n", "\n".join(lines)).strip()


def html_to_markdown(html_text: str | None) -> str:
    """Convert an HTML fragment to markdown text.

    Returns an empty string for empty input. Raises :class:`ConversionError`
    when the markup cannot be processed.
    """
    if not html_text or not html_text.strip():
        return ""
    try:
        soup = BeautifulSoup(html_text, "html.parser")
        for tag in soup.find_all(_DROP_TAGS):
            tag.decompose()
        return _tidy(_render_children(soup))
    except RecursionError as exc:
        raise ConversionError("HTML is nested too deeply to convert") from exc
    except Exception as exc:  # noqa: BLE001 - parser errors vary by input
        raise ConversionError(str(exc)) from exc
