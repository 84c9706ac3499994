"""Markdown to Slack mrkdwn conversion."""

import re

_FENCE = re.compile(r"```[^\n`]*\n(.*?)```", re.DOTALL)
_INLINE_CODE = re.compile(r"(`[^`\n]+`)")
_HEADING = re.compile(r"^#{1,6}\s+(.*?)\s*#*\s*$")
_BULLET = re.compile(r"^(\s*)[-*+]\s+(.*)$")
_QUOTE = re.compile(r"^>\s?(.*)$")
_RULE = re.compile(r"^\s*([-*_])(\s*\1){2,}\s*$")

_LINK = re.compile(r"\[([^\]\n]+)\]\(([^)\s]+)\)")
_BOLD = re.compile(r"\*\*(?=\S)(.+?)(?<=\S)\*\*|__(?=\S)(.+?)(?<=\S)__")
_ITALIC = re.compile(r"(?<![\w*])\*(?=\S)([^*\n]+?)(?<=\S)\*(?![\w*])")
_STRIKE = re.compile(r"~~(?=\S)(.+?)(?<=\S)~~")

# bold is parked on this marker while italics are converted
_BOLD_MARK = "\x00"


def escape(text: str) -> str:
    """Escape the three characters Slack reserves for markup."""
    return text.replace("&", "&amp;").replace("<", "&lt;").replace(">", "&gt;")


def _inline(text: str) -> str:
    parts = _INLINE_CODE.split(text)
    rendered = []
    for i, part in enumerate(parts):
        if i % 2 == 1:
            rendered.append(escape(part))
            continue
        part = escape(part)
        part = _LINK.sub(r"<\2|\1>", part)
        part = _BOLD.sub(
            lambda m: _BOLD_MARK + (m.group(1) or m.group(2)) + _BOLD_MARK, part
        )
        part = _ITALIC.sub(r"_\1_", part)
        part = _STRIKE.sub(r"~\1~", part)
        rendered.append(part.replace(_BOLD_MARK, "*"))
    return "".join(rendered)


def _render_line(line: str) -> str:
    heading = _HEADING.match(line)
    if heading:
        return f"*{_inline(heading.group(1))}*"

    if _RULE.match(line):
        return "──────────"

    bullet = _BULLET.match(line)
    if bullet:
        return f"{bullet.group(1)}• {_inline(bullet.group(2))}"

    quote = _QUOTE.match(line)
    if quote:
        return f"> {_inline(quote.group(1))}".rstrip()

    return _inline(line)


def _render_text(text: str) -> str:
    return "\n".join(_render_line(line) for line in text.split("\n"))


def render_mrkdwn(markdown: str) -> str:
    """Convert markdown to Slack mrkdwn.

    Code fences keep their content (escaped, language label dropped).
    Quotes stay quotes. Headings become bold lines, bullets become "•".
    An unterminated fence is rendered as plain text.

    Args:
        markdown: Markdown text.

    Returns:
        mrkdwn text.
    """
    rendered = []
    position = 0
    for fence in _FENCE.finditer(markdown):
        rendered.append(_render_text(markdown[position : fence.start()]))
        rendered.append("```\n" + escape(fence.group(1)) + "```")
        position = fence.end()
    rendered.append(_render_text(markdown[position:]))
    return "".join(rendered)
