"""Regex-triggered auto-reply rules."""

import logging
import re
import time
from collections.abc import Callable
from typing import Literal

from hibiki.domain.entities import (
    AutoReplyMatch,
    AutoReplyRule,
    Message,
    RuleDiagnostic,
    RuleEvaluation,
    RuleListing,
    create_auto_reply_rule,
)
from hibiki.domain.exceptions import RuleCompileError
from hibiki.domain.repositories import AutoReplyRuleRepository
from hibiki.domain.services.template import substitute_captures, substitute_sender

logger = logging.getLogger(__name__)


def compile_pattern(pattern: str) -> re.Pattern[str]:
    """Compile a rule pattern case-insensitively.

    Raises:
        RuleCompileError: If the pattern is not a valid regex.
    """
    try:
        return re.compile(pattern, re.IGNORECASE)
    except re.error as e:
        raise RuleCompileError(pattern, str(e)) from e


class AutoReplyService:
    """Stores, lists and evaluates auto-reply rules per chat.

    Rule rows are loaded through a short-lived per-chat cache and compiled
    patterns are cached by rule ID. Both caches are invalidated whenever a
    rule of the chat is registered or removed.
    """

    def __init__(
        self,
        repository: AutoReplyRuleRepository,
        *,
        cache_ttl_seconds: float = 60.0,
        clock: Callable[[], float] = time.monotonic,
    ) -> None:
        """Initialize the service.

        Args:
            repository: Rule persistence.
            cache_ttl_seconds: Lifetime of the per-chat rule cache.
            clock: Monotonic clock in seconds.
        """
        self._repository = repository
        self._cache_ttl = cache_ttl_seconds
        self._clock = clock
        self._rules_cache: dict[str, tuple[float, list[AutoReplyRule]]] = {}
        self._compiled: dict[int, re.Pattern[str] | RuleCompileError] = {}

    async def register_rule(
        self, chat_id: str, pattern: str, template: str
    ) -> AutoReplyRule:
        """Persist a new rule.

        Invalid patterns are rejected before anything is stored.

        Args:
            chat_id: Owning chat.
            pattern: Regular expression.
            template: Reply template.

        Returns:
            The stored rule.

        Raises:
            RuleCompileError: If the pattern does not compile.
        """
        compiled = compile_pattern(pattern)
        rule = await self._repository.add(
            create_auto_reply_rule(chat_id, pattern, template)
        )
        if rule.id is not None:
            self._compiled[rule.id] = compiled
        self._rules_cache.pop(chat_id, None)
        logger.info("Registered auto-reply rule %s in chat %s", rule.id, chat_id)
        return rule

    async def match_incoming(self, chat_id: str, message: Message) -> RuleEvaluation:
        """Evaluate every rule of a chat against an incoming message.

        Rules are tried in storage order and every matching rule fires.
        Rules whose pattern does not compile are reported as diagnostics.

        Args:
            chat_id: Chat ID.
            message: Incoming message.

        Returns:
            Replies to send and diagnostics for broken rules.
        """
        matches: list[AutoReplyMatch] = []
        diagnostics: list[RuleDiagnostic] = []
        if not message.text:
            return RuleEvaluation(matches=matches, diagnostics=diagnostics)

        for rule in await self._load_rules(chat_id):
            compiled = self._compile(rule)
            if isinstance(compiled, RuleCompileError):
                logger.warning(
                    "Skipping auto-reply rule %s in chat %s: %s",
                    rule.id,
                    chat_id,
                    compiled,
                )
                diagnostics.append(RuleDiagnostic(rule=rule, error=compiled.detail))
                continue

            match = compiled.search(message.text)
            if match is None:
                continue

            reply = substitute_captures(rule.template, match)
            reply = substitute_sender(reply, message.user)
            matches.append(AutoReplyMatch(rule=rule, reply=reply))

        return RuleEvaluation(matches=matches, diagnostics=diagnostics)

    async def list_rules(self, chat_id: str) -> list[RuleListing]:
        """List a chat's rules with their compile status."""
        listings = []
        for rule in await self._load_rules(chat_id):
            compiled = self._compile(rule)
            error = compiled.detail if isinstance(compiled, RuleCompileError) else None
            listings.append(RuleListing(rule=rule, error=error))
        return listings

    async def remove_rule(self, chat_id: str, rule_id: int | Literal["all"]) -> int:
        """Remove one rule (after checking ownership) or all rules of a chat.

        Args:
            chat_id: Chat issuing the removal.
            rule_id: Rule ID, or "all".

        Returns:
            Number of removed rules. 0 when the rule does not exist or
            belongs to another chat.
        """
        if rule_id == "all":
            rules = await self._repository.find_by_chat(chat_id)
            removed = await self._repository.delete_by_chat(chat_id)
            for rule in rules:
                if rule.id is not None:
                    self._compiled.pop(rule.id, None)
        else:
            rule = await self._repository.find_by_id(rule_id)
            if rule is None or rule.chat_id != chat_id:
                logger.info(
                    "Refusing to remove rule %s from chat %s: not owned",
                    rule_id,
                    chat_id,
                )
                return 0
            removed = 1 if await self._repository.delete(chat_id, rule_id) else 0
            self._compiled.pop(rule_id, None)

        self._rules_cache.pop(chat_id, None)
        return removed

    async def _load_rules(self, chat_id: str) -> list[AutoReplyRule]:
        """Load rules through the short-lived per-chat cache."""
        now = self._clock()
        cached = self._rules_cache.get(chat_id)
        if cached is not None and now - cached[0] < self._cache_ttl:
            return cached[1]

        rules = await self._repository.find_by_chat(chat_id)
        self._rules_cache[chat_id] = (now, rules)
        return rules

    def _compile(self, rule: AutoReplyRule) -> re.Pattern[str] | RuleCompileError:
        """Compile a rule lazily, caching the result by rule ID."""
        if rule.id is not None and rule.id in self._compiled:
            return self._compiled[rule.id]

        result: re.Pattern[str] | RuleCompileError
        try:
            result = compile_pattern(rule.pattern)
        except RuleCompileError as e:
            result = e

        if rule.id is not None:
            self._compiled[rule.id] = result
        return result
