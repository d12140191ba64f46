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
"""Unified exception hierarchy for corsroute.

All errors inherit from CorsRouteException so callers can catch the whole
family during application setup, or a specific subclass for targeted handling.

Categories:
- ValidationException: structurally invalid configuration
- ConflictException: configuration that contradicts already registered state
"""

from __future__ import annotations


# =============================================================================
# Base Exception
# =============================================================================


class CorsRouteException(Exception):
    """Base exception for all corsroute errors.

    Args:
        message: Human-readable error description.
        code: Machine-readable error code (e.g. "CORS_CONFLICT").
        context: Arbitrary key-value pairs describing the failure.
    """

    def __init__(
        self,
        message: str,
        code: str | None = None,
        context: dict | None = None,
    ) -> None:
        super().__init__(message)
        self.code = code
        self.context: dict = context if context is not None else {}


# =============================================================================
# Business Exceptions
# =============================================================================


class BusinessException(CorsRouteException):
    """Configuration rule violations."""


class ValidationException(BusinessException):
    """Input validation failures."""


class ConflictException(BusinessException):
    """Registration conflicts with the current route table."""


# =============================================================================
# CORS Exceptions
# =============================================================================


class PolicyCompilationException(ValidationException):
    """A CORS override could not be compiled into an effective policy."""

    def __init__(self, message: str, context: dict | None = None) -> None:
        super().__init__(message, code="CORS_POLICY_INVALID", context=context)


class ConfigurationConflictException(ConflictException):
    """Two routes on the same path resolved to different CORS policies."""

    def __init__(self, method: str, path: str) -> None:
        super().__init__(
            f"Cannot add multiple routes with different CORS options on different methods: {method} {path}",
            code="CORS_CONFLICT",
            context={"method": method, "path": path},
        )
        self.method = method
        self.path = path
