# Copyright 2026 Firefly Software Solutions Inc.
#
# Licensed under the Apache License, Version 2.0 (the "License");
# you may not use this file except in compliance with the License.
# You may obtain a copy of the License at
#
#     http://www.apache.org/licenses/LICENSE-2.0
#
# Unless required by applicable law or agreed to in writing, software
# distributed under the License is distributed on an "AS IS" BASIS,
# WITHOUT WARRANTIES OR CONDITIONS OF ANY KIND, either express or implied.
# See the License for the specific language governing permissions and
# limitations under the License.
"""Origin allow-list matching.

Patterns are either literal origins (``http://www.example.com``), the
match-anything literal ``*``, or an origin whose host carries one wildcard
label (``http://*.a.com``).  Wildcards are split into a prefix and suffix
once, at compile time; matching is plain string comparison.
"""

from __future__ import annotations

import enum
from collections.abc import Sequence
from dataclasses import dataclass

WILDCARD = "*"

# Characters a wildcard label may not span.
_LABEL_BREAKS = frozenset("./:")


class MatchKind(enum.Enum):
    """How an allow-list answered a request origin."""

    ABSENT = "absent"  # request carried no Origin header
    WILDCARD = "wildcard"  # allow-list is "*" and matching is off
    EXPOSED = "exposed"  # matching is off, full list is exposed
    REFLECTED = "reflected"  # request origin echoed back
    NO_MATCH = "no_match"


@dataclass(frozen=True)
class OriginMatch:
    kind: MatchKind
    value: str | None = None

    @property
    def reflected(self) -> bool:
        return self.kind is MatchKind.REFLECTED


@dataclass(frozen=True)
class OriginPattern:
    """A compiled allow-list entry."""

    source: str
    prefix: str
    suffix: str | None = None

    @classmethod
    def parse(cls, pattern: str) -> OriginPattern:
        validate_origin_pattern(pattern)
        if pattern == WILDCARD or WILDCARD not in pattern:
            return cls(source=pattern, prefix=pattern)
        prefix, suffix = pattern.split(WILDCARD, 1)
        return cls(source=pattern, prefix=prefix, suffix=suffix)

    @property
    def is_wildcard(self) -> bool:
        return self.suffix is not None

    def matches(self, origin: str) -> bool:
        if self.suffix is None:
            return origin == self.source
        if len(origin) <= len(self.prefix) + len(self.suffix):
            return False
        if not (origin.startswith(self.prefix) and origin.endswith(self.suffix)):
            return False
        label = origin[len(self.prefix) : len(origin) - len(self.suffix)]
        return not any(ch in _LABEL_BREAKS for ch in label)


def validate_origin_pattern(pattern: str) -> None:
    """Raise ValueError unless *pattern* is a literal, ``*``, or a one-label wildcard."""
    if not pattern:
        raise ValueError("origin pattern must not be empty")
    if pattern == WILDCARD:
        return
    count = pattern.count(WILDCARD)
    if count == 0:
        return
    if count > 1:
        raise ValueError(f"origin pattern '{pattern}' contains more than one wildcard")

    prefix, suffix = pattern.split(WILDCARD, 1)
    # The wildcard must open the host and be followed by a dot: scheme://*.host
    if not ((prefix == "" or prefix.endswith("://")) and suffix.startswith(".") and len(suffix) > 1):
        raise ValueError(f"wildcard in origin pattern '{pattern}' must occupy a whole subdomain label")


def compile_origins(origins: Sequence[str]) -> tuple[OriginPattern, ...]:
    return tuple(OriginPattern.parse(o) for o in origins)


def match_origin(
    origins: Sequence[str],
    request_origin: str | None,
    match_origin: bool = True,
    patterns: Sequence[OriginPattern] | None = None,
) -> OriginMatch:
    """Test *request_origin* against an allow-list.

    Args:
        origins: Allow-list in registration order.
        request_origin: Value of the request's ``Origin`` header, if any.
        match_origin: When false, the allow-list is answered verbatim
            instead of being matched.
        patterns: Pre-compiled form of *origins*; compiled on the fly if omitted.

    Returns:
        An :class:`OriginMatch`.  The first matching pattern wins and the
        request origin is echoed, never the pattern itself.
    """
    if not request_origin:
        return OriginMatch(MatchKind.ABSENT)

    if WILDCARD in origins:
        if not match_origin:
            return OriginMatch(MatchKind.WILDCARD, WILDCARD)
        return OriginMatch(MatchKind.REFLECTED, request_origin)

    if not match_origin:
        return OriginMatch(MatchKind.EXPOSED, " ".join(origins))

    for pattern in patterns if patterns is not None else compile_origins(origins):
        if pattern.matches(request_origin):
            return OriginMatch(MatchKind.REFLECTED, request_origin)

    return OriginMatch(MatchKind.NO_MATCH)
