"""
Origin rules for CORS.

CORS_ORIGINS is a comma-separated list. Each entry becomes one rule:
- "*"                      -> AnyOrigin
- "https://*.example.com"  -> PatternOrigin ("*" matches any run of characters)
- "https://example.com"    -> ExactOrigin
Rules are checked in order and the first match wins.
"""
import re
from dataclasses import dataclass, field
from typing import Iterable, Optional, Union

from starlette.middleware.cors import CORSMiddleware
from starlette.types import ASGIApp


@dataclass(frozen=True)
class AnyOrigin:
    def matches(self, origin: str) -> bool:
        return True


@dataclass(frozen=True)
class ExactOrigin:
    origin: str

    def matches(self, origin: str) -> bool:
        return origin == self.origin


@dataclass(frozen=True)
class PatternOrigin:
    pattern: str
    regex: re.Pattern = field(init=False, repr=False, compare=False)

    def __post_init__(self) -> None:
        parts = (re.escape(p) for p in self.pattern.split("*"))
        object.__setattr__(self, "regex", re.compile("^" + ".*".join(parts) + "$"))

    def matches(self, origin: str) -> bool:
        return bool(self.regex.match(origin))


OriginRule = Union[AnyOrigin, ExactOrigin, PatternOrigin]


def parse_origin_rule(entry: str) -> OriginRule:
    entry = entry.strip()
    if entry == "*":
        return AnyOrigin()
    if "*" in entry:
        return PatternOrigin(entry)
    return ExactOrigin(entry)


def parse_origin_rules(entries: Iterable[str]) -> list[OriginRule]:
    return [parse_origin_rule(e) for e in entries if e and e.strip()]


def match_origin(rules: list[OriginRule], origin: str) -> Optional[OriginRule]:
    """Return the first rule that accepts the origin, or None."""
    for rule in rules:
        if rule.matches(origin):
            return rule
    return None


class OriginRuleCORSMiddleware(CORSMiddleware):
    """Starlette CORS middleware driven by an ordered list of origin rules."""

    def __init__(self, app: ASGIApp, rules: list[OriginRule], **kwargs) -> None:
        self.rules = rules
        allow_all = any(isinstance(r, AnyOrigin) for r in rules)
        super().__init__(
            app,
            allow_origins=["*"] if allow_all else [],
            **kwargs,
        )

    def is_allowed_origin(self, origin: str) -> bool:
        return match_origin(self.rules, origin) is not None
