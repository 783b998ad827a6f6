"""Kubernetes API HTTP client.

Executes requests routed from a connection profile and the resource registry
over httpx, parses responses into resource models, and translates failures
into the integration's exception hierarchy.
"""

from __future__ import annotations

import json
import ssl
import tempfile
import threading
from collections.abc import Iterator, Mapping
from pathlib import Path
from typing import TYPE_CHECKING, Any, TypeVar

import httpx
import structlog
from tenacity import (
    retry,
    retry_if_exception_type,
    stop_after_attempt,
    wait_exponential,
)

from kubeclient.integrations.kubernetes.exceptions import (
    KubernetesApiError,
    KubernetesAuthError,
    KubernetesConflictError,
    KubernetesConnectionError,
    KubernetesNotFoundError,
    KubernetesValidationError,
)
from kubeclient.integrations.kubernetes.models.base import (
    KubeObject,
    KubeResource,
    KubeResourceList,
)
from kubeclient.integrations.kubernetes.operations import OperationKind, PatchStrategy
from kubeclient.integrations.kubernetes.registry import ResourceRegistry, default_registry
from kubeclient.integrations.kubernetes.router import KubeRequest, build_request
from kubeclient.integrations.kubernetes.watch import WatchEvent, decode_watch_stream

if TYPE_CHECKING:
    from kubeclient.integrations.kubernetes.config import KubeClientSettings
    from kubeclient.integrations.kubernetes.credentials import ClientCertificate
    from kubeclient.integrations.kubernetes.profile import ConnectionProfile

logger = structlog.get_logger()

ResourceT = TypeVar("ResourceT", bound=KubeResource)
ObjectT = TypeVar("ObjectT", bound=KubeObject)


def make_retry_decorator(attempts: int) -> Any:
    """Create a retry decorator for transient connection failures.

    The client never retries on its own; wrap calls with this where a retry
    is safe.

    Example:
        ```python
        get_pod = make_retry_decorator(3)(client.get)
        pod = get_pod(PodV1, "web-0")
        ```
    """
    return retry(
        retry=retry_if_exception_type(KubernetesConnectionError),
        stop=stop_after_attempt(attempts),
        wait=wait_exponential(multiplier=1, min=1, max=10),
        reraise=True,
    )


def build_ssl_context(profile: ConnectionProfile) -> ssl.SSLContext:
    """Build the TLS context a profile calls for.

    Verification uses the profile's CA bundle when present and the system
    trust store otherwise, and is disabled when the profile allows insecure
    connections. The client certificate, if any, is loaded into the context.
    """
    if profile.allow_insecure:
        context = ssl.create_default_context()
        context.check_hostname = False
        context.verify_mode = ssl.CERT_NONE
    elif profile.ca_certificate:
        context = ssl.create_default_context(cadata=profile.ca_certificate.decode("ascii"))
    else:
        context = ssl.create_default_context()

    if profile.client_certificate is not None:
        _load_client_certificate(context, profile.client_certificate)
    return context


def _load_client_certificate(context: ssl.SSLContext, certificate: ClientCertificate) -> None:
    # ssl only loads key material from files.
    with tempfile.TemporaryDirectory(prefix="kubeclient-") as tmp:
        cert_path = Path(tmp) / "client.crt"
        key_path = Path(tmp) / "client.key"
        cert_path.write_bytes(certificate.certificate_pem)
        key_path.touch(mode=0o600)
        key_path.write_bytes(certificate.key_pem)
        context.load_cert_chain(certfile=cert_path, keyfile=key_path)


class KubernetesClient:
    """HTTP client for the Kubernetes API.

    Requests are routed through the resource registry: each call names a
    resource model type and the client picks the URL template serving the
    operation with the parameters given.

    Namespace handling: ``namespace=None`` targets the profile's namespace;
    ``all_namespaces=True`` (list and watch) targets cluster scope. Cluster
    scoped resources ignore the namespace.

    Example:
        ```python
        from kubeclient.integrations.kubernetes import KubernetesClient, profile_from_kube_config
        from kubeclient.integrations.kubernetes.models import PodV1

        with KubernetesClient(profile_from_kube_config()) as client:
            for pod in client.list(PodV1).items:
                print(pod.name)
        ```
    """

    def __init__(
        self,
        profile: ConnectionProfile,
        *,
        registry: ResourceRegistry | None = None,
        timeout: float = 30,
        transport: httpx.BaseTransport | None = None,
    ) -> None:
        """Initialize the client.

        Args:
            profile: Resolved connection profile.
            registry: Resource registry (defaults to the process-wide one).
            timeout: Request timeout in seconds. Watch streams have no read
                timeout.
            transport: Optional httpx transport, mainly for tests.
        """
        self.profile = profile
        self.registry = registry or default_registry()
        self._timeout = timeout

        headers = {"Accept": "application/json"}
        if profile.bearer_token:
            headers["Authorization"] = f"Bearer {profile.bearer_token}"

        client_kwargs: dict[str, Any] = {
            "headers": headers,
            "timeout": httpx.Timeout(timeout),
            "verify": build_ssl_context(profile),
        }
        if transport is not None:
            client_kwargs["transport"] = transport

        self._client = httpx.Client(**client_kwargs)

        logger.info(
            "kubernetes_client_initialized",
            endpoint=profile.endpoint,
            context=profile.context_name,
            namespace=profile.namespace,
            credential=profile.dominant_credential,
        )

    @classmethod
    def from_settings(cls, settings: KubeClientSettings, **kwargs: Any) -> KubernetesClient:
        """Create a client for the profile the settings select."""
        from kubeclient.integrations.kubernetes.config import load_connection_profile

        kwargs.setdefault("timeout", settings.timeout)
        return cls(load_connection_profile(settings), **kwargs)

    # =========================================================================
    # Request Execution
    # =========================================================================

    def route(
        self,
        resource_type: type,
        operation: OperationKind,
        *,
        namespace: str | None = None,
        name: str | None = None,
        subresource: str | None = None,
        query: Mapping[str, Any] | None = None,
        patch_strategy: PatchStrategy | None = None,
    ) -> KubeRequest:
        """Route an operation against this client's profile and registry."""
        return build_request(
            self.profile,
            resource_type,
            operation,
            namespace=namespace,
            name=name,
            subresource=subresource,
            query=query,
            patch_strategy=patch_strategy,
            registry=self.registry,
        )

    def request(
        self,
        resource_type: type,
        operation: OperationKind,
        *,
        namespace: str | None = None,
        name: str | None = None,
        subresource: str | None = None,
        query: Mapping[str, Any] | None = None,
        body: Any = None,
        patch_strategy: PatchStrategy | None = None,
    ) -> dict[str, Any]:
        """Execute a non-streaming operation and return the decoded JSON body.

        Path parameters are used as given; no namespace defaulting happens
        here.

        Raises:
            UnsupportedOperationError: If the resource does not serve the operation.
            KubernetesConnectionError: If the API server cannot be reached.
            KubernetesApiError: If the API server returns an error response.
        """
        if operation.streams:
            raise ValueError(f"{operation} is a streaming operation; use watch()")

        kube_request = self.route(
            resource_type,
            operation,
            namespace=namespace,
            name=name,
            subresource=subresource,
            query=query,
            patch_strategy=patch_strategy,
        )

        kwargs: dict[str, Any] = {}
        if kube_request.has_body:
            kwargs["content"] = json.dumps(body if body is not None else {}).encode()
            kwargs["headers"] = {"Content-Type": kube_request.content_type}

        log = logger.bind(method=kube_request.method, url=kube_request.url)
        try:
            log.debug("kubernetes_api_request")
            response = self._client.request(kube_request.method, kube_request.url, **kwargs)
            log.debug("kubernetes_api_response", status=response.status_code)
        except (httpx.ConnectError, httpx.TimeoutException) as e:
            raise self._connection_error(e, log) from e

        return self._handle_response(
            response,
            resource_type=getattr(resource_type, "kube_kind", None),
            resource_name=name,
            namespace=namespace,
        )

    def _connection_error(self, error: httpx.HTTPError, log: Any) -> KubernetesConnectionError:
        if isinstance(error, httpx.TimeoutException):
            log.error("kubernetes_request_timeout", error=str(error))
            message = f"Kubernetes request timed out: {error}"
        else:
            log.error("kubernetes_connection_error", error=str(error))
            message = f"Failed to connect to {self.profile.endpoint}: {error}"
        return KubernetesConnectionError(message=message, original_error=error)

    def _handle_response(
        self,
        response: httpx.Response,
        resource_type: str | None = None,
        resource_name: str | None = None,
        namespace: str | None = None,
    ) -> dict[str, Any]:
        """Decode a response body or raise the matching API error.

        Raises:
            KubernetesAuthError: 401/403.
            KubernetesNotFoundError: 404.
            KubernetesConflictError: 409.
            KubernetesValidationError: 400/422.
            KubernetesApiError: Any other error status.
        """
        try:
            body = response.json() if response.content else {}
        except ValueError:
            body = {"raw": response.text}
        if not isinstance(body, dict):
            body = {"items": body}

        if response.is_success:
            return body

        status = response.status_code
        message = body.get("message") or f"Kubernetes API error: {status}"

        if status in (401, 403):
            raise KubernetesAuthError(
                message=message,
                status_code=status,
                reason=body.get("reason"),
                response_body=body,
            )

        if status == 404:
            raise KubernetesNotFoundError(
                message=message,
                resource_type=resource_type,
                resource_name=resource_name,
                namespace=namespace,
                response_body=body,
            )

        if status == 409:
            raise KubernetesConflictError(
                message=message,
                resource_type=resource_type,
                resource_name=resource_name,
                namespace=namespace,
                response_body=body,
            )

        if status in (400, 422):
            details = body.get("details") or {}
            raise KubernetesValidationError(
                message=message,
                validation_errors=list(details.get("causes") or []),
                status_code=status,
                response_body=body,
            )

        raise KubernetesApiError(
            message=message,
            status_code=status,
            response_body=body,
            resource_type=resource_type,
            resource_name=resource_name,
            namespace=namespace,
        )

    def _namespace(self, namespace: str | None, all_namespaces: bool = False) -> str | None:
        if all_namespaces:
            return None
        return namespace or self.profile.namespace

    def _manifest(self, resource: KubeObject) -> dict[str, Any]:
        descriptor = self.registry.descriptor_for(type(resource))
        manifest = resource.to_manifest()
        if descriptor.kind:
            manifest.setdefault("kind", descriptor.kind)
        if descriptor.api_version:
            manifest.setdefault("apiVersion", descriptor.api_version)
        return manifest

    # =========================================================================
    # Resource Operations
    # =========================================================================

    def get(
        self,
        resource_type: type[ObjectT],
        name: str,
        *,
        namespace: str | None = None,
        subresource: str | None = None,
    ) -> ObjectT:
        """Read one resource by name."""
        body = self.request(
            resource_type,
            OperationKind.GET,
            namespace=self._namespace(namespace),
            name=name,
            subresource=subresource,
        )
        return resource_type.model_validate(body)

    def list(
        self,
        resource_type: type[ResourceT],
        *,
        namespace: str | None = None,
        all_namespaces: bool = False,
        label_selector: str | None = None,
        field_selector: str | None = None,
        limit: int | None = None,
        continue_token: str | None = None,
    ) -> KubeResourceList[ResourceT]:
        """List resources of one type."""
        body = self.request(
            resource_type,
            OperationKind.LIST,
            namespace=self._namespace(namespace, all_namespaces),
            query={
                "labelSelector": label_selector,
                "fieldSelector": field_selector,
                "limit": limit,
                "continue": continue_token,
            },
        )
        return KubeResourceList[resource_type].model_validate(body)  # type: ignore[valid-type]

    def create(self, resource: ObjectT, *, namespace: str | None = None) -> ObjectT:
        """Create a resource and return the server's copy."""
        resource_type = type(resource)
        body = self.request(
            resource_type,
            OperationKind.CREATE,
            namespace=self._namespace(namespace or _namespace_of(resource)),
            name=_name_of(resource),
            body=self._manifest(resource),
        )
        return resource_type.model_validate(body)

    def update(self, resource: ResourceT, *, namespace: str | None = None) -> ResourceT:
        """Replace a resource with the given copy."""
        if not resource.name:
            raise ValueError("Cannot update a resource without metadata.name")
        resource_type = type(resource)
        body = self.request(
            resource_type,
            OperationKind.UPDATE,
            namespace=self._namespace(namespace or resource.namespace),
            name=resource.name,
            body=self._manifest(resource),
        )
        return resource_type.model_validate(body)

    def patch(
        self,
        resource_type: type[ObjectT],
        name: str,
        patch: dict[str, Any] | list[dict[str, Any]],
        *,
        namespace: str | None = None,
        strategy: PatchStrategy = PatchStrategy.MERGE,
        subresource: str | None = None,
    ) -> ObjectT:
        """Patch a resource.

        ``patch`` is a list of operations for JSON patch and a partial object
        for merge and strategic merge patch.
        """
        body = self.request(
            resource_type,
            OperationKind.PATCH,
            namespace=self._namespace(namespace),
            name=name,
            subresource=subresource,
            body=patch,
            patch_strategy=strategy,
        )
        return resource_type.model_validate(body)

    def delete(
        self,
        resource_type: type,
        name: str,
        *,
        namespace: str | None = None,
        propagation_policy: str | None = None,
    ) -> dict[str, Any]:
        """Delete a resource; returns the server's response (object or Status)."""
        return self.request(
            resource_type,
            OperationKind.DELETE,
            namespace=self._namespace(namespace),
            name=name,
            query={"propagationPolicy": propagation_policy},
        )

    def delete_collection(
        self,
        resource_type: type,
        *,
        namespace: str | None = None,
        label_selector: str | None = None,
    ) -> dict[str, Any]:
        """Delete every resource of a type matching a selector in a namespace."""
        return self.request(
            resource_type,
            OperationKind.DELETE_COLLECTION,
            namespace=self._namespace(namespace),
            query={"labelSelector": label_selector},
        )

    def watch(
        self,
        resource_type: type[ResourceT],
        *,
        name: str | None = None,
        namespace: str | None = None,
        all_namespaces: bool = False,
        resource_version: str | None = None,
        label_selector: str | None = None,
        cancel: threading.Event | None = None,
    ) -> Iterator[WatchEvent[ResourceT]]:
        """Watch one resource (``name`` given) or a collection for changes.

        Nothing is sent until the first event is requested. The response is
        released when the iterator is exhausted, closed, or cancelled.

        Raises:
            KubernetesConnectionError: If the API server cannot be reached.
            KubernetesApiError: If the watch request is rejected.
        """
        operation = OperationKind.WATCH if name else OperationKind.WATCH_LIST
        kube_request = self.route(
            resource_type,
            operation,
            namespace=self._namespace(namespace, all_namespaces),
            name=name,
            query={"resourceVersion": resource_version, "labelSelector": label_selector},
        )
        return self._stream_events(kube_request, resource_type, cancel)

    def _stream_events(
        self,
        kube_request: KubeRequest,
        resource_type: type[ResourceT],
        cancel: threading.Event | None,
    ) -> Iterator[WatchEvent[ResourceT]]:
        log = logger.bind(method=kube_request.method, url=kube_request.url)
        timeout = httpx.Timeout(self._timeout, read=None)
        try:
            with self._client.stream(
                kube_request.method, kube_request.url, timeout=timeout
            ) as response:
                log.debug("kubernetes_watch_opened", status=response.status_code)
                if not response.is_success:
                    response.read()
                    self._handle_response(response, getattr(resource_type, "kube_kind", None))
                done = threading.Event()
                if cancel is not None:
                    _close_on_cancel(response, cancel, done)
                try:
                    yield from decode_watch_stream(
                        response.iter_lines(), resource_type, cancel=cancel
                    )
                finally:
                    done.set()
        except (httpx.ConnectError, httpx.TimeoutException) as e:
            raise self._connection_error(e, log) from e
        log.debug("kubernetes_watch_closed")

    # =========================================================================
    # Cluster Information
    # =========================================================================

    def get_version(self) -> dict[str, Any]:
        """Get the API server's version information."""
        url = f"{self.profile.endpoint}/version"
        log = logger.bind(method="GET", url=url)
        try:
            response = self._client.get(url)
        except (httpx.ConnectError, httpx.TimeoutException) as e:
            raise self._connection_error(e, log) from e
        return self._handle_response(response)

    def check_connection(self) -> bool:
        """Check whether the API server answers.

        Returns:
            True if the version endpoint responds successfully, False otherwise.
        """
        try:
            self.get_version()
            return True
        except (KubernetesApiError, KubernetesConnectionError):
            return False

    def close(self) -> None:
        """Close the HTTP client and release resources."""
        self._client.close()
        logger.debug("kubernetes_client_closed")

    def __enter__(self) -> KubernetesClient:
        """Context manager entry."""
        return self

    def __exit__(self, *args: Any) -> None:
        """Context manager exit."""
        self.close()


def _namespace_of(resource: KubeObject) -> str | None:
    return getattr(getattr(resource, "metadata", None), "namespace", None)


def _name_of(resource: KubeObject) -> str | None:
    return getattr(getattr(resource, "metadata", None), "name", None)


def _close_on_cancel(
    response: httpx.Response, cancel: threading.Event, done: threading.Event
) -> threading.Thread:
    """Close ``response`` from a daemon thread once ``cancel`` is set.

    A read blocked on a quiet watch only returns when its connection is
    closed, so the decoder alone cannot notice cancellation in time.
    """

    def watch_cancel() -> None:
        while not done.is_set():
            if cancel.wait(0.1):
                if not done.is_set():
                    logger.debug("kubernetes_watch_cancel_closing")
                    response.close()
                return

    thread = threading.Thread(target=watch_cancel, name="kubeclient-watch-cancel", daemon=True)
    thread.start()
    return thread
