"""Declarative network policy applied to every renderer page."""

from __future__ import annotations

import logging
from collections import deque
from dataclasses import dataclass

logger = logging.getLogger(__name__)

ALLOWED_RESOURCE_TYPES = frozenset({"document", "stylesheet", "font"})
ALLOWED_SCHEMES = ("file:", "data:", "blob:")
BLOCKED_HISTORY = 50


@dataclass(frozen=True)
class RouteDecision:
    allow: bool
    error_code: str | None = None


class NetworkPolicy:
    """Decides which requests a page may make.

    Only document, stylesheet and font loads from local or embedded origins are
    let through. Off-machine loads of those types abort as
    ``internetdisconnected``; every other resource type aborts as
    ``blockedbyclient``.
    """

    def __init__(
        self,
        allowed_resource_types: frozenset[str] = ALLOWED_RESOURCE_TYPES,
        allowed_schemes: tuple[str, ...] = ALLOWED_SCHEMES,
    ):
        self.allowed_resource_types = frozenset(allowed_resource_types)
        self.allowed_schemes = tuple(allowed_schemes)
        # most recent blocked URLs, shared by every page the policy is applied to
        self.blocked: deque[str] = deque(maxlen=BLOCKED_HISTORY)

    def decide(self, url: str, resource_type: str) -> RouteDecision:
        if resource_type not in self.allowed_resource_types:
            return RouteDecision(False, "blockedbyclient")
        if url.startswith(self.allowed_schemes):
            return RouteDecision(True)
        return RouteDecision(False, "internetdisconnected")

    async def handle_route(self, route) -> None:
        """Playwright route handler: continue or abort at the network layer."""
        request = route.request
        decision = self.decide(request.url, request.resource_type)
        if decision.allow:
            await route.continue_()
            return
        self.blocked.append(request.url)
        logger.debug("Blocked %s request to %s", request.resource_type, request.url)
        await route.abort(decision.error_code)

    async def apply(self, target) -> None:
        """Install the policy on a Playwright page or browser context."""
        await target.route("**/*", self.handle_route)
