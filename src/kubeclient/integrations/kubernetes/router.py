"""Request routing: resource type + operation → method, URL and streaming flag."""

from __future__ import annotations

from collections.abc import Mapping
from dataclasses import dataclass
from typing import TYPE_CHECKING, Any
from urllib.parse import urlencode

import structlog

from kubeclient.integrations.kubernetes.exceptions import UnsupportedOperationError
from kubeclient.integrations.kubernetes.operations import OperationKind, PatchStrategy, UrlTemplate
from kubeclient.integrations.kubernetes.registry import ResourceRegistry, default_registry

if TYPE_CHECKING:
    from kubeclient.integrations.kubernetes.profile import ConnectionProfile

logger = structlog.get_logger()

_METHODS: dict[OperationKind, str] = {
    OperationKind.GET: "GET",
    OperationKind.LIST: "GET",
    OperationKind.WATCH: "GET",
    OperationKind.WATCH_LIST: "GET",
    OperationKind.CREATE: "POST",
    OperationKind.UPDATE: "PUT",
    OperationKind.PATCH: "PATCH",
    OperationKind.DELETE: "DELETE",
    OperationKind.DELETE_COLLECTION: "DELETE",
}

_WITH_BODY = frozenset({OperationKind.CREATE, OperationKind.UPDATE, OperationKind.PATCH})


@dataclass(frozen=True)
class KubeRequest:
    """A fully-routed API request target."""

    operation: OperationKind
    method: str
    url: str
    streaming: bool = False
    patch_strategy: PatchStrategy | None = None

    @property
    def has_body(self) -> bool:
        """Whether the operation sends a request body."""
        return self.operation in _WITH_BODY

    @property
    def content_type(self) -> str | None:
        """Request body content type, if the operation sends a body."""
        if self.patch_strategy is not None:
            return self.patch_strategy.content_type
        return "application/json" if self.has_body else None


def select_template(
    templates: tuple[UrlTemplate, ...],
    supplied: frozenset[str],
) -> UrlTemplate | None:
    """Pick the most specific template whose placeholders are all supplied.

    Ties go to the template declared first.
    """
    best: UrlTemplate | None = None
    for template in templates:
        if not template.accepts(supplied):
            continue
        if best is None or len(template.parameters) > len(best.parameters):
            best = template
    return best


def build_request(
    profile: ConnectionProfile,
    resource_type: type,
    operation: OperationKind,
    *,
    namespace: str | None = None,
    name: str | None = None,
    subresource: str | None = None,
    query: Mapping[str, Any] | None = None,
    patch_strategy: PatchStrategy | None = None,
    registry: ResourceRegistry | None = None,
) -> KubeRequest:
    """Route an operation on a resource type to a concrete request.

    Args:
        profile: Connection profile supplying the API endpoint.
        resource_type: Resource model type.
        operation: Operation to perform.
        namespace: Namespace path parameter.
        name: Resource name path parameter.
        subresource: Subresource path parameter (e.g. ``status``).
        query: Query string parameters; None values are dropped.
        patch_strategy: Patch format for PATCH (defaults to merge patch).
        registry: Registry to look the resource type up in.

    Returns:
        The routed request.

    Raises:
        UnsupportedOperationError: If no declared template serves the
            operation with the supplied parameters, or a subresource is
            given that no such template addresses.
    """
    descriptor = (registry or default_registry()).descriptor_for(resource_type)
    values = {
        key: value
        for key, value in (("namespace", namespace), ("name", name), ("subresource", subresource))
        if value
    }

    templates = descriptor.templates_for(operation)
    if subresource:
        # A supplied subresource must appear in the path.
        templates = tuple(t for t in templates if "subresource" in t.parameters)

    template = select_template(templates, frozenset(values))
    if template is None:
        raise UnsupportedOperationError(
            kind=descriptor.kind or resource_type.__name__,
            operation=str(operation),
            parameters=sorted(values),
        )

    url = f"{profile.endpoint}/{template.expand(values)}"
    if query:
        params = {k: _query_value(v) for k, v in query.items() if v is not None}
        if params:
            url = f"{url}?{urlencode(params, doseq=True)}"

    if operation is OperationKind.PATCH:
        patch_strategy = patch_strategy or PatchStrategy.MERGE
    else:
        patch_strategy = None

    request = KubeRequest(
        operation=operation,
        method=_METHODS[operation],
        url=url,
        streaming=operation.streams,
        patch_strategy=patch_strategy,
    )
    logger.debug(
        "routed_request",
        kind=descriptor.kind,
        operation=str(operation),
        method=request.method,
        template=template.path,
    )
    return request


def _query_value(value: Any) -> Any:
    if isinstance(value, bool):
        return "true" if value else "false"
    return value
