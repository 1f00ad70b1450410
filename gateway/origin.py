"""
Origin admission.

SECURITY BOUNDARY - decides whether a caller's declared Origin is served.
Pure predicate over (origin, policy). No memory across calls.

Policy = exact allow-list ∪ trusted domain suffix ∪ dev prefix.
An absent Origin (curl, health checks, server-to-server) is admitted.
"""

import logging
from dataclasses import dataclass
from typing import Callable, List, Optional, Tuple
from urllib.parse import urlsplit

logger = logging.getLogger(__name__)

OriginRule = Callable[[str], bool]


@dataclass(frozen=True)
class OriginPolicy:
    """Configured allow-policy values."""

    allowed_origins: Tuple[str, ...] = ()
    trusted_suffixes: Tuple[str, ...] = ()
    dev_prefixes: Tuple[str, ...] = ()


@dataclass(frozen=True)
class OriginDecision:
    origin: Optional[str]
    admitted: bool


def _host_of(origin: str) -> str:
    try:
        return (urlsplit(origin).hostname or "").lower()
    except ValueError:
        return ""


def exact_match(allowed: Tuple[str, ...]) -> OriginRule:
    allowed_set = frozenset(allowed)
    return lambda origin: origin in allowed_set


def suffix_match(suffixes: Tuple[str, ...]) -> OriginRule:
    normalized = tuple(s.lower().lstrip(".") for s in suffixes if s)

    def rule(origin: str) -> bool:
        host = _host_of(origin)
        if not host:
            return False
        return any(host == s or host.endswith("." + s) for s in normalized)

    return rule


def prefix_match(prefixes: Tuple[str, ...]) -> OriginRule:
    usable = tuple(p for p in prefixes if p)
    return lambda origin: origin.startswith(usable) if usable else False


def compose(policy: OriginPolicy) -> List[OriginRule]:
    return [
        exact_match(policy.allowed_origins),
        suffix_match(policy.trusted_suffixes),
        prefix_match(policy.dev_prefixes),
    ]


class OriginGuard:
    """Admits or rejects a request by its Origin header value."""

    def __init__(self, policy: OriginPolicy):
        self.policy = policy
        self._rules = compose(policy)

    def evaluate(self, origin: Optional[str]) -> OriginDecision:
        """Pure decision, no logging."""
        if not origin:
            return OriginDecision(origin=origin, admitted=True)
        admitted = any(rule(origin) for rule in self._rules)
        return OriginDecision(origin=origin, admitted=admitted)

    def admit(self, origin: Optional[str]) -> bool:
        decision = self.evaluate(origin)
        self._log(decision)
        return decision.admitted

    @staticmethod
    def _log(decision: OriginDecision) -> None:
        # Logging must never block admission
        try:
            if decision.admitted:
                logger.info(f"Incoming request origin: {decision.origin} (admitted)")
            else:
                logger.warning(f"Incoming request origin: {decision.origin} (rejected)")
        except Exception:
            pass
