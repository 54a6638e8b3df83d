"""Markdown to HTML rendering for blog post bodies."""

from __future__ import annotations

import html as html_mod
import re

_TABLE_SEPARATOR = re.compile(r"^\|[\s\-:|]+\|$")
_ORDERED_ITEM = re.compile(r"^\d+\. ")
_HEADING = re.compile(r"^(#{1,6}) (.*)$")


def render_markdown(md: str) -> str:
    """Small line-oriented markdown renderer. Not a full parser.

    Supports: headings, ordered and unordered lists, tables, blockquotes,
    horizontal rules, paragraphs, and inline code, bold, italic, links and
    images. Input is HTML-escaped first, so raw HTML in the markdown is
    shown as text.
    """
    result: list[str] = []
    list_tag: str | None = None
    in_table = False
    in_blockquote = False

    def close_list():
        nonlocal list_tag
        if list_tag:
            result.append(f"</{list_tag}>")
            list_tag = None

    def open_list(tag: str):
        nonlocal list_tag
        if list_tag != tag:
            close_list()
            result.append(f"<{tag}>")
            list_tag = tag

    for line in md.split("\n"):
        escaped = html_mod.escape(line.rstrip())

        is_table_line = escaped.startswith("|") and escaped.endswith("|") and len(escaped) > 1

        if in_table and not is_table_line:
            result.append("</tbody></table>")
            in_table = False

        if in_blockquote and not escaped.startswith("&gt; "):
            result.append("</blockquote>")
            in_blockquote = False

        heading = _HEADING.match(escaped)

        if heading:
            close_list()
            level = len(heading.group(1))
            text = heading.group(2).strip()
            slug = re.sub(r"[^a-z0-9]+", "-", text.lower()).strip("-")
            result.append(f'<h{level} id="{slug}">{_inline_format(text)}</h{level}>')

        elif re.match(r"^(-{3,}|\*{3,})$", escaped):
            close_list()
            result.append("<hr>")

        elif is_table_line:
            close_list()
            if _TABLE_SEPARATOR.match(escaped):
                continue
            cells = [c.strip() for c in escaped.split("|")[1:-1]]
            if not in_table:
                # First row is always the header
                result.append("<table><thead><tr>")
                result.extend(f"<th>{_inline_format(c)}</th>" for c in cells)
                result.append("</tr></thead><tbody>")
                in_table = True
            else:
                result.append("<tr>")
                result.extend(f"<td>{_inline_format(c)}</td>" for c in cells)
                result.append("</tr>")

        elif escaped.startswith("&gt; "):
            close_list()
            if not in_blockquote:
                result.append("<blockquote>")
                in_blockquote = True
            result.append(f"<p>{_inline_format(escaped[5:])}</p>")

        elif re.match(r"^\s*[-*] ", escaped):
            open_list("ul")
            text = re.sub(r"^\s*[-*] ", "", escaped)
            result.append(f"<li>{_inline_format(text)}</li>")

        elif _ORDERED_ITEM.match(escaped):
            open_list("ol")
            text = _ORDERED_ITEM.sub("", escaped)
            result.append(f"<li>{_inline_format(text)}</li>")

        elif escaped.strip():
            close_list()
            result.append(f"<p>{_inline_format(escaped.strip())}</p>")

        else:
            close_list()

    close_list()
    if in_table:
        result.append("</tbody></table>")
    if in_blockquote:
        result.append("</blockquote>")

    return "\n".join(result)


def _inline_format(text: str) -> str:
    """Apply inline markdown formatting (code, images, links, bold, italic)."""
    text = re.sub(r"`(.+?)`", r"<code>\1</code>", text)
    # Images before links: ![alt](url)
    text = re.sub(r"!\[([^\]]*)\]\(([^)\s]+)\)", r'<img src="\2" alt="\1">', text)
    text = re.sub(r"\[([^\]]+)\]\(([^)\s]+)\)", r'<a href="\2">\1</a>', text)
    text = re.sub(r"\*\*(.+?)\*\*", r"<strong>\1</strong>", text)
    text = re.sub(r"\*(.+?)\*", r"<em>\1</em>", text)
    return text
