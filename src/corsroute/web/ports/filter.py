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
"""WebFilter protocol: the framework-agnostic filter interface.

Request and response are typed ``Any`` so Starlette types stay inside the
adapter package.
"""

from __future__ import annotations

from collections.abc import Callable, Coroutine
from typing import Any, Protocol, runtime_checkable

# Next callable in the chain: Callable[[Request], Coroutine[Any, Any, Response]]
CallNext = Callable[..., Coroutine[Any, Any, Any]]


@runtime_checkable
class WebFilter(Protocol):
    """An HTTP request/response filter.

    Filters run in ``@order`` order inside one ``WebFilterChainMiddleware``.
    A filter may inspect the request, delegate to ``call_next``, and then
    adjust the response the route produced.
    """

    async def do_filter(self, request: Any, call_next: CallNext) -> Any:
        """Run the filter; must await ``call_next(request)`` to continue the chain."""
        ...

    def should_not_filter(self, request: Any) -> bool:
        """Return ``True`` to skip this filter for the given request."""
        ...
