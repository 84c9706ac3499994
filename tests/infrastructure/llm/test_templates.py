"""Tests for prompt template helpers."""

from datetime import datetime, timezone

import pytest
from jinja2 import UndefinedError

from hibiki.infrastructure.llm.templates import (
    create_jinja_env,
    format_timestamp,
    get_template,
)


class TestFormatTimestamp:
    """format_timestamp のテスト"""

    def test_minutes_precision(self) -> None:
        assert (
            format_timestamp(datetime(2024, 3, 5, 9, 7, 59, tzinfo=timezone.utc))
            == "2024-03-05 09:07"
        )


class TestJinjaEnv:
    """create_jinja_env のテスト"""

    def test_environment_is_shared(self) -> None:
        assert create_jinja_env() is create_jinja_env()

    def test_filter_registered(self) -> None:
        assert create_jinja_env().filters["format_timestamp"] is format_timestamp

    def test_no_autoescape(self) -> None:
        template = create_jinja_env().from_string("{{ text }}")

        assert template.render(text="<a & b>") == "<a & b>"

    def test_undefined_variable_is_error(self) -> None:
        """未定義の変数は空文字にならずエラーになる"""
        with pytest.raises(UndefinedError):
            get_template("response_system.j2").render(prompt="P")
