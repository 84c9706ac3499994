"""Tests for effect payload parsing."""

import pytest

from hibiki.domain.entities import (
    AutoReplyPayload,
    RememberPayload,
    ReplyAfterPayload,
    parse_effect_payload,
)
from hibiki.domain.exceptions import EffectValidationError


class TestParseEffectPayload:
    """parse_effect_payload のテスト"""

    def test_remember_from_json(self) -> None:
        payload = parse_effect_payload('{"kind": "remember", "message": "牛乳"}')
        assert payload == RememberPayload(message="牛乳")

    def test_auto_reply_from_mapping(self) -> None:
        payload = parse_effect_payload(
            {"kind": "auto_reply", "when": "^hi$", "message": "hello"}
        )
        assert isinstance(payload, AutoReplyPayload)
        assert payload.when == "^hi$"

    def test_reply_after(self) -> None:
        payload = parse_effect_payload(
            {"kind": "reply_after", "timeout": 100, "message": "done"}
        )
        assert isinstance(payload, ReplyAfterPayload)
        assert payload.timeout == 100

    def test_invalid_json(self) -> None:
        with pytest.raises(EffectValidationError) as exc_info:
            parse_effect_payload("{not json")
        assert exc_info.value.raw == "{not json"
        assert "invalid JSON" in exc_info.value.detail

    def test_unknown_kind(self) -> None:
        with pytest.raises(EffectValidationError):
            parse_effect_payload({"kind": "shutdown"})

    def test_missing_field(self) -> None:
        with pytest.raises(EffectValidationError) as exc_info:
            parse_effect_payload({"kind": "auto_reply", "when": "x"})
        assert "message" in exc_info.value.detail

    def test_extra_field_is_rejected(self) -> None:
        with pytest.raises(EffectValidationError):
            parse_effect_payload({"kind": "remember", "message": "x", "extra": 1})

    def test_non_positive_timeout_is_rejected(self) -> None:
        with pytest.raises(EffectValidationError) as exc_info:
            parse_effect_payload({"kind": "reply_after", "timeout": 0, "message": "x"})
        assert "timeout" in exc_info.value.detail

    def test_raw_mapping_is_reported_as_json(self) -> None:
        with pytest.raises(EffectValidationError) as exc_info:
            parse_effect_payload({"kind": "remember"})
        assert exc_info.value.raw == '{"kind": "remember"}'

    @pytest.mark.parametrize(
        "raw",
        [
            '{"kind": "reply_after", "timeout": "100", "message": "x"}',
            '{"kind": "reply_after", "timeout": true, "message": "x"}',
            '{"kind": "reply_after", "timeout": Infinity, "message": "x"}',
        ],
    )
    def test_timeout_must_be_a_finite_number(self, raw: str) -> None:
        """数値以外や無限大の timeout は受け付けない"""
        with pytest.raises(EffectValidationError) as exc_info:
            parse_effect_payload(raw)
        assert "timeout" in exc_info.value.detail

    def test_message_must_be_a_string(self) -> None:
        with pytest.raises(EffectValidationError):
            parse_effect_payload({"kind": "remember", "message": 42})

    def test_fractional_timeout(self) -> None:
        payload = parse_effect_payload(
            '{"kind": "reply_after", "timeout": 1.5, "message": "x"}'
        )
        assert isinstance(payload, ReplyAfterPayload)
        assert payload.timeout == 1.5
