# OneAI (c) 2025 Ajay Rajput
# Licensed under Business Source License 1.1 – see LICENSE for details.
"""
Capability router.

Maps ``(task, model hint, credential snapshot)`` to an ordered list of
candidate providers. Routing is pure and synchronous: the same inputs always
produce the same decision.

Two stages, evaluated in order:

1. ``MATCH_RULES``: an ordered table of ``(predicate, provider)`` pairs over
   the model hint. The first rule whose provider supports the task wins and
   becomes the only candidate. Matching is case-sensitive. Namespaced
   prefixes come before vendor-family substrings, so ``deepseek-ai/...`` is
   served by Together while ``deepseek-chat`` goes to DeepSeek.
2. ``DEFAULT_CHAINS``: the task's priority chain, filtered to providers with
   a configured key. When none has a key the full chain is returned, marked
   absent, so the degradation policy can act on it.
"""

from __future__ import annotations

from collections.abc import Callable, Mapping
from dataclasses import dataclass
from types import MappingProxyType

import structlog

from ..core.credentials import CredentialSnapshot
from ..core.exceptions import RoutingError
from ..models import Task
from ..providers.registry import PROVIDERS
from ..telemetry.metrics import ROUTING_DECISIONS
from ..telemetry.tracing import start_span

logger = structlog.get_logger(__name__)


@dataclass(frozen=True)
class MatchRule:
    name: str
    predicate: Callable[[str], bool]
    provider_id: str


def _prefix(prefix: str, provider_id: str) -> MatchRule:
    return MatchRule(f"prefix:{prefix}", lambda hint: hint.startswith(prefix), provider_id)


def _contains(fragment: str, provider_id: str) -> MatchRule:
    return MatchRule(f"contains:{fragment}", lambda hint: fragment in hint, provider_id)


MATCH_RULES: tuple[MatchRule, ...] = (
    # Namespaced model ids
    _prefix("meta-llama/", "together"),
    _prefix("mistralai/", "together"),
    _prefix("deepseek-ai/", "together"),
    _prefix("Qwen/", "together"),
    _prefix("black-forest-labs/", "together"),
    _prefix("togethercomputer/", "together"),
    _prefix("google/", "google"),
    _prefix("runway/", "aimlapi"),
    _prefix("stability-ai/", "replicate"),
    _prefix("meta/musicgen", "replicate"),
    # Vendor families
    _contains("gpt-", "openai"),
    _contains("o1-", "openai"),
    _contains("dall-e", "openai"),
    _contains("whisper", "openai"),
    _contains("tts-1", "openai"),
    _contains("claude-", "anthropic"),
    _contains("gemini", "google"),
    _contains("grok", "xai"),
    _contains("xai", "xai"),
    _contains("deepseek", "deepseek"),
    _contains("kimi", "kimi"),
    _contains("moonshot", "kimi"),
    _contains("eleven_", "elevenlabs"),
    _contains("heygen", "heygen"),
    _contains("suno", "suno"),
)

DEFAULT_CHAINS: Mapping[Task, tuple[str, ...]] = MappingProxyType(
    {
        Task.CHAT: ("together", "aimlapi", "openai"),
        Task.IMAGE: ("together", "openai", "replicate"),
        Task.VIDEO: ("aimlapi", "heygen"),
        Task.AUDIO: ("elevenlabs", "openai"),
        Task.TRANSCRIPTION: ("openai",),
        Task.MUSIC: ("suno", "replicate"),
    }
)


@dataclass(frozen=True)
class Candidate:
    provider_id: str
    present: bool


@dataclass(frozen=True)
class RouteDecision:
    """Ordered candidates for one request plus the rule that produced them."""

    task: Task
    model_hint: str | None
    candidates: tuple[Candidate, ...]
    rule: str

    @property
    def selected(self) -> Candidate:
        return self.candidates[0]

    @property
    def pattern_matched(self) -> bool:
        return self.rule != "chain"

    def failover_candidates(self) -> tuple[Candidate, ...]:
        """Configured candidates after the selected one. Pattern matches never fail over."""
        if self.pattern_matched:
            return ()
        return tuple(c for c in self.candidates[1:] if c.present)


class CapabilityRouter:
    """Stateless router over a rule table and per-task chains."""

    def __init__(
        self,
        rules: tuple[MatchRule, ...] = MATCH_RULES,
        chains: Mapping[Task, tuple[str, ...]] = DEFAULT_CHAINS,
    ) -> None:
        self.rules = rules
        self.chains = chains

    def match(self, task: Task, model_hint: str | None) -> MatchRule | None:
        """First rule matching the hint whose provider supports the task."""
        if not model_hint:
            return None
        for rule in self.rules:
            if rule.predicate(model_hint) and PROVIDERS[rule.provider_id].supports(task):
                return rule
        return None

    def route(
        self, task: Task, model_hint: str | None, credentials: CredentialSnapshot
    ) -> RouteDecision:
        with start_span("router.route", task=task.value, model_hint=model_hint):
            rule = self.match(task, model_hint)
            if rule is not None:
                candidates: tuple[Candidate, ...] = (
                    Candidate(rule.provider_id, credentials.is_present(rule.provider_id)),
                )
                decision = RouteDecision(task, model_hint, candidates, rule.name)
            else:
                chain = self.chains.get(task)
                if not chain:
                    raise RoutingError(f"No providers configured for task {task.value}", task=task.value)
                present = tuple(Candidate(pid, True) for pid in chain if credentials.is_present(pid))
                candidates = present or tuple(Candidate(pid, False) for pid in chain)
                decision = RouteDecision(task, model_hint, candidates, "chain")

        ROUTING_DECISIONS.labels(
            task=task.value,
            provider=decision.selected.provider_id,
            rule="chain" if rule is None else "pattern",
        ).inc()
        logger.info(
            "routing_decision",
            task=task.value,
            model_hint=model_hint,
            provider=decision.selected.provider_id,
            present=decision.selected.present,
            rule=decision.rule,
            candidates=[c.provider_id for c in decision.candidates],
        )
        return decision
