from pathlib import Path
from typing import List, Optional, Union

from pydantic import BaseModel, ConfigDict, Field, ValidationError, field_validator

from .errors import ConfigError, InvalidBaseUrlError, ScanError

VERSION = "0.1.0"
DEFAULT_USER_AGENT = f"dirprobe/{VERSION}"


def normalize_base(base: str) -> str:
    """
    Accept only http:// or https:// bases and make sure they end with '/'.

    "http://example.com" -> "http://example.com/"
    "https://x/y/"       -> "https://x/y/"
    "ftp://example.com"  -> InvalidBaseUrlError
    """
    b = base.strip()
    if not (b.startswith("http://") or b.startswith("https://")):
        raise InvalidBaseUrlError(base)
    if not b.endswith("/"):
        b += "/"
    return b


def parse_extensions(raw: Union[str, List[str], None]) -> List[str]:
    """
    Turn "php, .html,,..txt" into [".php", ".html", ".txt"].
    Empty tokens are dropped; every kept token gets exactly one leading dot.
    """
    if raw is None:
        return []
    tokens = raw.split(",") if isinstance(raw, str) else raw
    out: List[str] = []
    for token in tokens:
        t = str(token).strip()
        if not t:
            continue
        out.append("." + t.lstrip("."))
    return out


class ScanConfig(BaseModel):
    model_config = ConfigDict(frozen=True)

    base: str
    wordlist: Optional[Path] = None
    concurrency: int = Field(50, gt=0)
    prefer_get: bool = False
    timeout: float = Field(10.0, gt=0)
    extensions: List[str] = []
    user_agent: str = DEFAULT_USER_AGENT

    @field_validator("base", mode="before")
    @classmethod
    def _check_base(cls, v):
        try:
            return normalize_base(str(v))
        except InvalidBaseUrlError as e:
            # re-raised as a plain ValueError so pydantic can collect it
            raise ValueError(e.message) from e

    @field_validator("extensions", mode="before")
    @classmethod
    def _check_extensions(cls, v):
        return parse_extensions(v)

    @classmethod
    def build(cls, **fields) -> "ScanConfig":
        """Validate fields, turning pydantic errors into ConfigError."""
        try:
            return cls(**fields)
        except ValidationError as e:
            for err in e.errors():
                if err["loc"] and err["loc"][0] == "base":
                    raise InvalidBaseUrlError(str(fields.get("base"))) from e
            first = e.errors()[0]
            field = ".".join(str(x) for x in first["loc"]) or "config"
            raise ConfigError(f"invalid {field}: {first['msg']}") from e


class ProbeOutcome(BaseModel):
    """What is kept of one response: status plus two optional headers."""

    status: int
    content_length: Optional[str] = None
    location: Optional[str] = None


class ScanResult(BaseModel):
    model_config = ConfigDict(arbitrary_types_allowed=True)

    targets: int = 0
    dispatched: int = 0
    skipped: int = 0
    found: int = 0
    failed: int = 0
    error: Optional[ScanError] = None

    @property
    def ok(self) -> bool:
        return self.error is None

    def raise_for_error(self) -> None:
        if self.error is not None:
            raise self.error
