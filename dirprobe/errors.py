"""Exception hierarchy for dirprobe.

Only ConfigError/WordlistError (raised before probing) and ScanError
(raised by a dispatched unit) ever end a run. GateClosedError is absorbed
by the engine as a skipped target.
"""

from typing import Optional


class DirprobeError(Exception):
    """Base class for every error dirprobe raises on purpose."""

    def __init__(self, message: str):
        super().__init__(message)
        self.message = message


class ConfigError(DirprobeError):
    """Invalid scan configuration."""


class InvalidBaseUrlError(ConfigError):
    def __init__(self, base: str):
        super().__init__(f"base must start with http:// or https:// (got {base!r})")
        self.base = base


class WordlistError(DirprobeError):
    def __init__(self, path: str, reason: str):
        super().__init__(f"cannot read wordlist {path}: {reason}")
        self.path = path


class ScanError(DirprobeError):
    """A dispatched probe unit ended in error."""

    def __init__(self, url: str, message: str):
        super().__init__(message)
        self.url = url


class ProbeError(ScanError):
    """Transport failure: DNS, TLS, refused connection or timeout."""

    def __init__(self, url: str, cause: Optional[BaseException] = None):
        if cause is None:
            detail = "unknown error"
        else:
            detail = str(cause) or type(cause).__name__
        super().__init__(url, f"http error for {url}: {detail}")


class UnitAbortedError(ScanError):
    """The unit was cancelled or crashed before producing an outcome."""

    def __init__(self, url: str, reason: str):
        super().__init__(url, f"probe task for {url} aborted: {reason}")


class GateClosedError(DirprobeError):
    def __init__(self):
        super().__init__("concurrency gate is closed")
