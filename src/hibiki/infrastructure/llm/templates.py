"""Prompt templates (Jinja2)."""

from datetime import datetime
from functools import lru_cache

from jinja2 import Environment, PackageLoader, StrictUndefined, Template


def format_timestamp(timestamp: datetime) -> str:
    """メモ等の日時をプロンプト用に YYYY-MM-DD HH:MM で表す"""
    return timestamp.strftime("%Y-%m-%d %H:%M")


@lru_cache(maxsize=1)
def create_jinja_env() -> Environment:
    """hibiki.infrastructure.llm/templates を読む Environment を返す

    プロンプトはプレーンテキストなので autoescape は使わない。
    未定義の変数はテンプレートの誤りとしてエラーにする。
    """
    env = Environment(
        loader=PackageLoader("hibiki.infrastructure.llm", "templates"),
        autoescape=False,
        undefined=StrictUndefined,
        trim_blocks=True,
        lstrip_blocks=True,
    )
    env.filters["format_timestamp"] = format_timestamp
    return env


def get_template(name: str) -> Template:
    return create_jinja_env().get_template(name)
