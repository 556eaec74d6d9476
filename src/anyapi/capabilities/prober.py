"""Schema-less discovery by trial calls against conventional REST paths.

A probe is recorded only on an explicit success (< 400) or an explicit
405 "wrong method" answer. Everything else is dropped, so missing endpoints
are expected and phantom ones are not.
"""

from __future__ import annotations

import asyncio
import logging
from collections.abc import Iterable, Sequence
from dataclasses import dataclass, field

from anyapi.broker import ProxyClient, ProxyRequest, ProxyTransportError
from anyapi.capabilities.types import Category, Endpoint, HttpMethod

logger = logging.getLogger(__name__)


@dataclass(frozen=True, slots=True)
class Probe:
    """One candidate (method, path) with its assumed category."""

    method: HttpMethod
    path: str
    category: Category


@dataclass(slots=True)
class ProviderHint:
    """Extra probes and known limitations for a well-known provider."""

    probes: list[Probe] = field(default_factory=list)
    limitations: list[str] = field(default_factory=list)


@dataclass(slots=True)
class ProbeReport:
    endpoints: list[Endpoint] = field(default_factory=list)
    limitations: list[str] = field(default_factory=list)


def _probe(method: str, path: str, category: Category) -> Probe:
    return Probe(method=HttpMethod(method), path=path, category=category)


PROBE_TABLE: list[Probe] = [
    # Profile
    _probe("GET", "/me", Category.PROFILE),
    _probe("GET", "/user", Category.PROFILE),
    _probe("GET", "/users/me", Category.PROFILE),
    _probe("GET", "/api/v1/me", Category.PROFILE),
    _probe("GET", "/api/v1/user", Category.PROFILE),
    # Messaging
    _probe("GET", "/messages", Category.MESSAGING),
    _probe("GET", "/conversations", Category.MESSAGING),
    _probe("GET", "/api/v1/messages", Category.MESSAGING),
    _probe("POST", "/messages/send", Category.MESSAGING),
    # Social
    _probe("GET", "/posts", Category.SOCIAL),
    _probe("GET", "/feed", Category.SOCIAL),
    _probe("GET", "/timeline", Category.SOCIAL),
    _probe("POST", "/posts", Category.SOCIAL),
    # Contacts
    _probe("GET", "/contacts", Category.CONTACTS),
    _probe("GET", "/connections", Category.CONTACTS),
    _probe("GET", "/friends", Category.CONTACTS),
    # Search
    _probe("GET", "/search", Category.SEARCH),
    _probe("GET", "/api/search", Category.SEARCH),
    # Calendar
    _probe("GET", "/events", Category.CALENDAR),
    _probe("GET", "/calendar", Category.CALENDAR),
    _probe("POST", "/events", Category.CALENDAR),
    # Files
    _probe("GET", "/files", Category.FILES),
    _probe("GET", "/documents", Category.FILES),
    _probe("POST", "/upload", Category.FILES),
]

PROVIDER_HINTS: dict[str, ProviderHint] = {
    "linkedin": ProviderHint(
        probes=[
            _probe("GET", "/v2/userinfo", Category.PROFILE),
            _probe("POST", "/v2/ugcPosts", Category.SOCIAL),
            _probe("POST", "/v2/messages", Category.MESSAGING),
        ],
        limitations=["Cannot read messages", "Cannot list connections"],
    ),
    "slack": ProviderHint(
        probes=[
            _probe("POST", "/chat.postMessage", Category.MESSAGING),
            _probe("GET", "/conversations.list", Category.CONTACTS),
            _probe("GET", "/users.list", Category.CONTACTS),
        ],
    ),
    "github": ProviderHint(
        probes=[
            _probe("GET", "/user", Category.PROFILE),
            _probe("GET", "/user/repos", Category.FILES),
            _probe("GET", "/issues", Category.GENERAL),
        ],
    ),
    "gmail": ProviderHint(
        probes=[
            _probe("POST", "/gmail/v1/users/me/messages/send", Category.MESSAGING),
            _probe("GET", "/gmail/v1/users/me/messages", Category.MESSAGING),
        ],
    ),
}


def build_probe_table(
    provider: str,
    *,
    use_hints: bool = True,
    base: Sequence[Probe] = PROBE_TABLE,
) -> list[Probe]:
    """Provider hints first, then the generic table, without duplicate (method, path)."""
    candidates: list[Probe] = []
    if use_hints and (hint := PROVIDER_HINTS.get(provider)):
        candidates.extend(hint.probes)
    candidates.extend(base)

    seen: set[tuple[HttpMethod, str]] = set()
    table: list[Probe] = []
    for probe in candidates:
        key = (probe.method, probe.path)
        if key not in seen:
            seen.add(key)
            table.append(probe)
    return table


def _flip_method(method: HttpMethod) -> HttpMethod:
    return HttpMethod.POST if method == HttpMethod.GET else HttpMethod.GET


class EndpointProber:
    """Issues minimal trial calls and keeps the ones with explicit signals."""

    def __init__(
        self,
        proxy: ProxyClient,
        *,
        timeout: float = 3.0,
        concurrency: int = 8,
    ) -> None:
        self._proxy = proxy
        self._timeout = timeout
        self._semaphore = asyncio.Semaphore(max(1, concurrency))

    async def probe_all(
        self,
        provider: str,
        connection_id: str,
        probes: Iterable[Probe],
    ) -> ProbeReport:
        """Run every probe and aggregate once all have settled.

        Probes are independent: one failing or timing out never affects the
        others. The returned endpoints follow probe table order.
        """
        probe_list = list(probes)
        outcomes = await asyncio.gather(
            *(self._run(provider, connection_id, probe) for probe in probe_list)
        )

        report = ProbeReport()
        index: dict[tuple[HttpMethod, str], int] = {}
        for endpoint, limitation in outcomes:
            if limitation and limitation not in report.limitations:
                report.limitations.append(limitation)
            if endpoint is None:
                continue
            key = (endpoint.method, endpoint.path)
            existing = index.get(key)
            if existing is None:
                index[key] = len(report.endpoints)
                report.endpoints.append(endpoint)
            elif endpoint.responsive and not report.endpoints[existing].responsive:
                report.endpoints[existing] = endpoint
        return report

    async def _run(
        self,
        provider: str,
        connection_id: str,
        probe: Probe,
    ) -> tuple[Endpoint | None, str | None]:
        is_get = probe.method == HttpMethod.GET
        request = ProxyRequest(
            method=probe.method.value,
            endpoint=probe.path,
            connection_id=connection_id,
            provider_config_key=provider,
            params={"limit": 1} if is_get else None,
            data=None if is_get else {},
            timeout=self._timeout,
        )
        async with self._semaphore:
            try:
                # The broker enforces the timeout too; this bounds the probe locally.
                response = await asyncio.wait_for(
                    self._proxy.proxy(request), timeout=self._timeout + 1.0
                )
            except (ProxyTransportError, TimeoutError) as e:
                logger.debug(f"Probe {probe.method} {probe.path} failed: {e!r}")
                return None, None
            except Exception:
                logger.warning(
                    "probe_failed",
                    exc_info=True,
                    extra={
                        "integration.provider": provider,
                        "http.method": probe.method.value,
                        "url.path": probe.path,
                    },
                )
                return None, None

        if response.status < 400:
            sample: tuple[str, ...] = ()
            if is_get and isinstance(response.data, dict):
                sample = tuple(str(key) for key in list(response.data)[:5])
            logger.debug(
                "probe_found",
                extra={
                    "integration.provider": provider,
                    "http.method": probe.method.value,
                    "url.path": probe.path,
                    "capability.category": probe.category.value,
                },
            )
            return (
                Endpoint(
                    method=probe.method,
                    path=probe.path,
                    category=probe.category,
                    responsive=True,
                    source="probe",
                    sample_response=sample,
                ),
                None,
            )

        if response.status == 405:
            return (
                Endpoint(
                    method=_flip_method(probe.method),
                    path=probe.path,
                    category=probe.category,
                    responsive=False,
                    source="probe",
                ),
                None,
            )

        if response.status in (401, 403):
            return None, (
                f"{probe.method.value} {probe.path} ({probe.category.words}) "
                "requires additional permissions"
            )

        return None, None
