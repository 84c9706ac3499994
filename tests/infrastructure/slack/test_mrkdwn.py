"""Tests for markdown to mrkdwn conversion."""

from hibiki.infrastructure.slack.mrkdwn import escape, render_mrkdwn


class TestEscape:
    """escape のテスト"""

    def test_reserved_characters(self) -> None:
        assert escape("a < b && c > d") == "a &lt; b &amp;&amp; c &gt; d"


class TestRenderMrkdwn:
    """render_mrkdwn のテスト"""

    def test_bold_and_italic(self) -> None:
        assert render_mrkdwn("**bold** and *italic*") == "*bold* and _italic_"

    def test_strike(self) -> None:
        assert render_mrkdwn("~~gone~~") == "~gone~"

    def test_link(self) -> None:
        assert render_mrkdwn("[site](https://example.com)") == "<https://example.com|site>"

    def test_heading(self) -> None:
        assert render_mrkdwn("## Title") == "*Title*"

    def test_bullets(self) -> None:
        assert render_mrkdwn("- a\n  * b") == "• a\n  • b"

    def test_rule(self) -> None:
        assert render_mrkdwn("---") == "──────────"

    def test_quote_is_kept(self) -> None:
        assert render_mrkdwn("> quoted") == "> quoted"

    def test_inline_code_is_untouched(self) -> None:
        assert render_mrkdwn("run `**x**` now") == "run `**x**` now"

    def test_fence_keeps_content(self) -> None:
        markdown = "before\n```python\nprint(**x**)\n```\nafter **b**"
        assert render_mrkdwn(markdown) == "before\n```\nprint(**x**)\n```\nafter *b*"

    def test_fence_content_is_escaped(self) -> None:
        assert render_mrkdwn("```\na<b\n```") == "```\na&lt;b\n```"

    def test_plain_text(self) -> None:
        assert render_mrkdwn("こんにちは") == "こんにちは"
