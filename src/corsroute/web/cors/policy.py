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
"""CORS configuration and policy compilation.

Three layers:

- :class:`CorsOptions`: a partial, authoring-time override (route or
  connection level), validated with Pydantic.
- :class:`CorsConfig`: a fully populated set of connection defaults.
- :class:`EffectivePolicy`: the frozen, resolved policy attached to a route.

``compile_policy()`` turns defaults plus a route override into an
``EffectivePolicy``.
"""

from __future__ import annotations

import dataclasses
import enum
import functools
from collections.abc import Iterable, Mapping
from dataclasses import dataclass, field
from typing import Any

from pydantic import BaseModel, ConfigDict, Field, ValidationError, field_validator
from pydantic.alias_generators import to_camel

from corsroute.core.config import config_properties
from corsroute.kernel.exceptions import PolicyCompilationException
from corsroute.web.cors.origin import OriginPattern, compile_origins, validate_origin_pattern

BASE_METHODS: tuple[str, ...] = ("GET", "HEAD", "POST", "PUT", "PATCH", "DELETE", "OPTIONS")
DEFAULT_HEADERS: tuple[str, ...] = ("Authorization", "Content-Type", "If-None-Match")
DEFAULT_EXPOSED_HEADERS: tuple[str, ...] = ("WWW-Authenticate", "Server-Authorization")
DEFAULT_MAX_AGE = 86400

_APPEND_FIELDS = {
    "additional_headers",
    "additional_methods",
    "additional_exposed_headers",
}


def dedupe(values: Iterable[str]) -> tuple[str, ...]:
    """Drop repeated entries, keeping first-seen order."""
    return tuple(dict.fromkeys(values))


class OverrideMode(enum.Enum):
    """What to do when a handler already set a header the policy wants to set."""

    REPLACE = "replace"
    PRESERVE = "preserve"
    MERGE = "merge"

    @classmethod
    def from_value(cls, value: bool | str | OverrideMode) -> OverrideMode:
        """Map the authoring forms ``True`` / ``False`` / ``"merge"`` onto a mode."""
        if isinstance(value, OverrideMode):
            return value
        if value is True:
            return cls.REPLACE
        if value is False:
            return cls.PRESERVE
        return cls(value)


# =============================================================================
# Authoring-time options
# =============================================================================


@config_properties(prefix="corsroute.web.cors")
class CorsOptions(BaseModel):
    """Partial CORS settings.

    Every field is optional; only fields that are explicitly given take part in
    a merge.  Keys may be written in snake_case or camelCase
    (``is_origin_exposed`` / ``isOriginExposed``).
    """

    model_config = ConfigDict(
        alias_generator=to_camel,
        populate_by_name=True,
        extra="forbid",
        frozen=True,
    )

    enabled: bool | None = None
    origin: list[str] | None = None
    is_origin_exposed: bool | None = None
    match_origin: bool | None = None
    credentials: bool | None = None
    headers: list[str] | None = None
    methods: list[str] | None = None
    exposed_headers: list[str] | None = None
    additional_headers: list[str] | None = None
    additional_methods: list[str] | None = None
    additional_exposed_headers: list[str] | None = None
    max_age: int | None = Field(default=None, ge=0)
    override: bool | OverrideMode | None = None

    @field_validator("origin")
    @classmethod
    def _check_origins(cls, value: list[str] | None) -> list[str] | None:
        for pattern in value or ():
            validate_origin_pattern(pattern)
        return value

    @field_validator(
        "headers",
        "methods",
        "exposed_headers",
        "additional_headers",
        "additional_methods",
        "additional_exposed_headers",
        mode="before",
    )
    @classmethod
    def _split_tokens(cls, value: Any) -> Any:
        # "Authorization, Content-Type" is accepted as a token list
        if isinstance(value, str):
            return [token.strip() for token in value.split(",") if token.strip()]
        return value

    @classmethod
    def coerce(cls, value: Any) -> CorsOptions:
        """Validate a mapping (or pass through an instance), raising PolicyCompilationException."""
        if isinstance(value, CorsOptions):
            return value
        if not isinstance(value, Mapping):
            raise PolicyCompilationException(
                f"CORS options must be a boolean or a mapping, got {type(value).__name__}",
                context={"value": repr(value)},
            )
        try:
            return cls.model_validate(dict(value))
        except ValidationError as exc:
            raise PolicyCompilationException(
                f"Invalid CORS options: {exc}",
                context={"errors": exc.errors(include_url=False)},
            ) from exc

    def explicit(self) -> dict[str, Any]:
        """Fields that were explicitly given a non-null value."""
        return {k: v for k, v in self.model_dump(exclude_unset=True).items() if v is not None}


# =============================================================================
# Connection defaults
# =============================================================================


@dataclass(frozen=True)
class CorsConfig:
    """Fully populated CORS settings used as the defaults for every route."""

    enabled: bool = True
    origin: tuple[str, ...] = ("*",)
    is_origin_exposed: bool = True
    match_origin: bool = True
    credentials: bool = False
    headers: tuple[str, ...] = DEFAULT_HEADERS
    methods: tuple[str, ...] | None = None  # None = BASE_METHODS
    exposed_headers: tuple[str, ...] = DEFAULT_EXPOSED_HEADERS
    additional_headers: tuple[str, ...] = ()
    additional_methods: tuple[str, ...] = ()
    additional_exposed_headers: tuple[str, ...] = ()
    max_age: int | None = DEFAULT_MAX_AGE
    override: OverrideMode = OverrideMode.REPLACE

    def __post_init__(self) -> None:
        # Constructed directly, a config bypasses CorsOptions validation.
        for pattern in self.origin:
            try:
                validate_origin_pattern(pattern)
            except ValueError as exc:
                raise PolicyCompilationException(
                    f"Invalid CORS origin: {exc}",
                    context={"origin": pattern},
                ) from exc

    def merge(self, options: CorsOptions | Mapping[str, Any]) -> CorsConfig:
        """Return a copy with *options* applied.

        Scalars and explicit lists overwrite; ``additional_*`` lists are
        appended to the ones already present.  A partial without an explicit
        ``enabled`` turns CORS on.
        """
        changes: dict[str, Any] = {"enabled": True}
        for name, value in CorsOptions.coerce(options).explicit().items():
            if name in _APPEND_FIELDS:
                changes[name] = getattr(self, name) + tuple(value)
            elif name == "override":
                changes[name] = OverrideMode.from_value(value)
            elif isinstance(value, list):
                changes[name] = tuple(value)
            else:
                changes[name] = value
        return dataclasses.replace(self, **changes)

    def to_policy(self, route_method: str | None = None) -> EffectivePolicy:
        if not self.enabled:
            return DISABLED
        route_methods: tuple[str, ...] = ()
        if route_method and route_method != "*":
            route_methods = (route_method.upper(),)
        return EffectivePolicy(
            enabled=True,
            origins=dedupe(self.origin),
            methods=dedupe([*(self.methods or BASE_METHODS), *self.additional_methods, "OPTIONS"]),
            headers=dedupe([*self.headers, *self.additional_headers]),
            exposed_headers=dedupe([*self.exposed_headers, *self.additional_exposed_headers]),
            credentials=self.credentials,
            max_age=self.max_age,
            match_origin=self.match_origin,
            is_origin_exposed=self.is_origin_exposed,
            override=self.override,
            route_methods=route_methods,
        )


def resolve_defaults(value: bool | CorsConfig | CorsOptions | Mapping[str, Any] | None) -> CorsConfig:
    """Build connection defaults from ``None``/``False`` (off), ``True`` or a partial."""
    if isinstance(value, CorsConfig):
        return value
    if value is None or value is False:
        return CorsConfig(enabled=False)
    if value is True:
        return CorsConfig()
    return CorsConfig().merge(value)


# =============================================================================
# Effective policy
# =============================================================================


@dataclass(frozen=True)
class EffectivePolicy:
    """The resolved CORS policy of one route.

    Equality covers every CORS-relevant field except ``route_methods``, so two
    sibling routes that differ only in their own verb compare equal.
    """

    enabled: bool
    origins: tuple[str, ...] = ()
    methods: tuple[str, ...] = ()
    headers: tuple[str, ...] = ()
    exposed_headers: tuple[str, ...] = ()
    credentials: bool = False
    max_age: int | None = None
    match_origin: bool = True
    is_origin_exposed: bool = True
    override: OverrideMode = OverrideMode.REPLACE
    route_methods: tuple[str, ...] = field(default=(), compare=False)

    @functools.cached_property
    def patterns(self) -> tuple[OriginPattern, ...]:
        return compile_origins(self.origins)

    @property
    def allowed_methods(self) -> tuple[str, ...]:
        return dedupe([*self.methods, *self.route_methods])

    def with_route_methods(self, methods: Iterable[str]) -> EffectivePolicy:
        return dataclasses.replace(self, route_methods=dedupe(methods))


DISABLED = EffectivePolicy(enabled=False)


RouteCors = bool | CorsOptions | Mapping[str, Any] | None


def compile_policy(
    defaults: CorsConfig,
    override: RouteCors = None,
    route_method: str | None = None,
) -> EffectivePolicy:
    """Resolve a route's effective policy.

    Args:
        defaults: Connection-level defaults.
        override: ``False`` disables CORS for the route, ``None`` inherits the
            defaults, ``True`` inherits them with CORS forced on, and a
            partial mapping is merged onto them.
        route_method: The route's own verb, folded into ``allowed_methods``.

    Raises:
        PolicyCompilationException: If the override is malformed.
    """
    if override is False:
        return DISABLED
    if override is None:
        config = defaults
    elif override is True:
        config = dataclasses.replace(defaults, enabled=True)
    else:
        config = defaults.merge(CorsOptions.coerce(override))
    return config.to_policy(route_method)
