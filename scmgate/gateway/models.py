"""Call descriptors passed into the gateway."""

from __future__ import annotations

import dataclasses
import typing as typ

if typ.TYPE_CHECKING:
    import collections.abc as cabc


@dataclasses.dataclass(frozen=True, slots=True)
class CallDescriptor:
    """A single remote call: which operation, with which credential and params.

    Built per invocation and handed to
    :meth:`scmgate.gateway.client.ResilientGateway.invoke` exactly once. The
    token is excluded from ``repr`` so descriptors are safe to log.
    """

    operation: str
    token: str = dataclasses.field(repr=False)
    params: cabc.Mapping[str, typ.Any] = dataclasses.field(default_factory=dict)
    scope: str = "repos"

    @property
    def qualified_name(self) -> str:
        """Return ``scope.operation`` for logs and errors."""
        return f"{self.scope}.{self.operation}"
