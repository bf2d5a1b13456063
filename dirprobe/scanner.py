import asyncio
import logging
from typing import Awaitable, Callable, List, Mapping, Optional, Sequence, Tuple

import aiohttp

from .analyzer import format_line, is_interesting_status
from .errors import (
    ConfigError, GateClosedError, ProbeError, ScanError, UnitAbortedError
)
from .models import ProbeOutcome, ScanConfig, ScanResult
from .wordlists import build_targets

log = logging.getLogger("dirprobe.scanner")

Prober = Callable[[aiohttp.ClientSession, str, bool], Awaitable[ProbeOutcome]]
LineCb = Callable[[str], None]


def make_session(config: ScanConfig) -> aiohttp.ClientSession:
    """Shared client for a whole scan. Must be created inside the running loop."""
    return aiohttp.ClientSession(
        timeout=aiohttp.ClientTimeout(total=config.timeout),
        headers={"User-Agent": config.user_agent},
        connector=aiohttp.TCPConnector(limit=config.concurrency),
    )


def header_text(headers: Mapping[str, str], name: str) -> Optional[str]:
    """Header value as text, or None if missing or not visible ASCII."""
    value = headers.get(name)
    if value is None:
        return None
    if not all(c == "\t" or 32 <= ord(c) < 127 for c in value):
        return None
    return value


def summarize_response(resp: aiohttp.ClientResponse) -> ProbeOutcome:
    return ProbeOutcome(
        status=resp.status,
        content_length=header_text(resp.headers, "Content-Length"),
        location=header_text(resp.headers, "Location"),
    )


async def _send(session: aiohttp.ClientSession, method: str, url: str) -> ProbeOutcome:
    async with session.request(method, url, allow_redirects=False) as r:
        outcome = summarize_response(r)
        if method != "HEAD":
            # drop the body unread; the connection is not reused
            r.close()
        return outcome


async def probe(session: aiohttp.ClientSession, url: str, prefer_get: bool) -> ProbeOutcome:
    """
    One logical probe: GET if prefer_get, else HEAD with a single GET
    fallback when the server answers 405. Redirects are never followed.
    """
    try:
        if prefer_get:
            return await _send(session, "GET", url)
        outcome = await _send(session, "HEAD", url)
        if outcome.status == 405:
            outcome = await _send(session, "GET", url)
        return outcome
    except (aiohttp.ClientError, asyncio.TimeoutError) as e:
        raise ProbeError(url, e) from e


def _print_line(line: str) -> None:
    print(line, flush=True)


class Permit:
    """One slot of a ConcurrencyGate. Releasing twice is a no-op."""

    def __init__(self, gate: "ConcurrencyGate"):
        self._gate = gate
        self._held = True

    @property
    def held(self) -> bool:
        return self._held

    def release(self) -> None:
        if self._held:
            self._held = False
            self._gate._release()

    def bind(self, task: asyncio.Task) -> None:
        """Tie this permit to the task: it is released however the task ends."""
        task.add_done_callback(lambda _t: self.release())


class ConcurrencyGate:
    def __init__(self, limit: int):
        if limit < 1:
            raise ConfigError(f"concurrency must be at least 1 (got {limit})")
        self.limit = limit
        self._sem = asyncio.Semaphore(limit)
        self._closed = False
        self.in_flight = 0
        self.peak = 0

    @property
    def closed(self) -> bool:
        return self._closed

    async def acquire(self) -> Permit:
        """Wait for a free slot. Raises GateClosedError once the gate is closed."""
        if self._closed:
            raise GateClosedError()
        await self._sem.acquire()
        if self._closed:
            self._sem.release()
            raise GateClosedError()
        self.in_flight += 1
        self.peak = max(self.peak, self.in_flight)
        return Permit(self)

    def close(self) -> None:
        self._closed = True

    def _release(self) -> None:
        self.in_flight -= 1
        self._sem.release()


class ScanEngine:
    def __init__(
        self,
        session: aiohttp.ClientSession,
        config: ScanConfig,
        *,
        prober: Optional[Prober] = None,
        on_found: Optional[LineCb] = None,
        gate: Optional[ConcurrencyGate] = None,
    ):
        self.session = session
        self.config = config
        self.prober = prober or probe
        self.on_found = on_found or _print_line
        self.gate = gate or ConcurrencyGate(config.concurrency)

    def shutdown(self) -> None:
        """Stop dispatching; targets not yet launched are skipped."""
        self.gate.close()

    async def _check_one(self, url: str) -> bool:
        try:
            outcome = await self.prober(self.session, url, self.config.prefer_get)
        except ScanError as e:
            log.debug("Probe failed: %s", e)
            raise
        if not is_interesting_status(outcome.status):
            return False
        self.on_found(format_line(url, outcome))
        return True

    @staticmethod
    def _unit_error(url: str, task: asyncio.Task) -> Optional[ScanError]:
        if task.cancelled():
            return UnitAbortedError(url, "cancelled")
        exc = task.exception()
        if exc is None:
            return None
        if isinstance(exc, ScanError):
            return exc
        err = UnitAbortedError(url, repr(exc))
        err.__cause__ = exc
        return err

    async def run(self, targets: Sequence[str]) -> ScanResult:
        """
        Dispatch one unit per target in order, each holding a gate permit,
        then join them in launch order. Nothing is cancelled when a unit
        fails; the first failure by launch order becomes the result error.
        """
        result = ScanResult(targets=len(targets))
        jobs: List[Tuple[str, asyncio.Task]] = []

        for url in targets:
            try:
                permit = await self.gate.acquire()
            except GateClosedError:
                log.warning("failed to acquire permit, skipping %s", url)
                result.skipped += 1
                continue
            task = asyncio.create_task(self._check_one(url))
            permit.bind(task)
            jobs.append((url, task))
        result.dispatched = len(jobs)

        for url, task in jobs:
            # asyncio.wait never raises the task's own error or cancellation
            await asyncio.wait([task])
            err = self._unit_error(url, task)
            if err is None:
                if task.result():
                    result.found += 1
                continue
            result.failed += 1
            if result.error is None:
                result.error = err

        log.info(
            "Scan done: targets=%d dispatched=%d skipped=%d found=%d failed=%d peak=%d",
            result.targets, result.dispatched, result.skipped,
            result.found, result.failed, self.gate.peak,
        )
        return result


async def scan(
    config: ScanConfig,
    words: Sequence[str],
    *,
    on_found: Optional[LineCb] = None,
) -> ScanResult:
    targets = build_targets(config.base, words, config.extensions)
    log.info("Built %d targets from %d words (exts=%s)", len(targets), len(words), config.extensions)
    async with make_session(config) as session:
        engine = ScanEngine(session, config, on_found=on_found)
        return await engine.run(targets)
