"""Resource operations and the URL templates that serve them."""

from __future__ import annotations

import re
from collections.abc import Mapping
from dataclasses import dataclass
from enum import StrEnum
from functools import cached_property
from urllib.parse import quote

_PLACEHOLDER_RE = re.compile(r"\{(\w+)\}")


class OperationKind(StrEnum):
    """Operations a resource API can declare."""

    GET = "get"
    LIST = "list"
    WATCH = "watch"
    WATCH_LIST = "watch_list"
    CREATE = "create"
    UPDATE = "update"
    PATCH = "patch"
    DELETE = "delete"
    DELETE_COLLECTION = "delete_collection"

    @property
    def streams(self) -> bool:
        """Whether the response is a stream of watch events."""
        return self in (OperationKind.WATCH, OperationKind.WATCH_LIST)


class PatchStrategy(StrEnum):
    """Patch formats accepted by the API server."""

    JSON = "json"
    MERGE = "merge"
    STRATEGIC_MERGE = "strategic-merge"

    @property
    def content_type(self) -> str:
        """Request content type for this patch format."""
        return f"application/{self.value}-patch+json"


@dataclass(frozen=True)
class UrlTemplate:
    """A relative API path with ``{placeholder}`` slots and the operations it serves.

    Example:
        >>> t = url_template("api/v1/namespaces/{namespace}/pods/{name}", OperationKind.GET)
        >>> t.expand({"namespace": "default", "name": "web-0"})
        'api/v1/namespaces/default/pods/web-0'
    """

    path: str
    operations: frozenset[OperationKind]

    @cached_property
    def parameters(self) -> frozenset[str]:
        """Placeholder names the template requires."""
        return frozenset(_PLACEHOLDER_RE.findall(self.path))

    def serves(self, operation: OperationKind) -> bool:
        return operation in self.operations

    def accepts(self, supplied: frozenset[str] | set[str]) -> bool:
        """Whether every placeholder is bound by the supplied parameter names."""
        return self.parameters <= supplied

    def expand(self, values: Mapping[str, str]) -> str:
        """Substitute placeholder values, each escaped as a single path segment.

        Raises:
            KeyError: If a placeholder has no value.
        """
        return _PLACEHOLDER_RE.sub(lambda m: quote(values[m.group(1)], safe=""), self.path)


def url_template(path: str, *operations: OperationKind) -> UrlTemplate:
    """Declare a URL template serving the given operations."""
    return UrlTemplate(path=path.lstrip("/"), operations=frozenset(operations))
