# OneAI (c) 2025 Ajay Rajput
# Licensed under Business Source License 1.1 – see LICENSE for details.
"""
Routing for OneAI: picks the vendor that serves each capability request.
"""

from .router import DEFAULT_CHAINS, MATCH_RULES, CapabilityRouter, Candidate, MatchRule, RouteDecision

__all__ = [
    "DEFAULT_CHAINS",
    "MATCH_RULES",
    "CapabilityRouter",
    "Candidate",
    "MatchRule",
    "RouteDecision",
]
