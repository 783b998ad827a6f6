"""Kubernetes client custom exceptions."""

from __future__ import annotations

from typing import Any


class KubernetesError(Exception):
    """Base exception for Kubernetes client operations.

    Attributes:
        message: Human-readable error message.
        status_code: HTTP status code from Kubernetes API (if applicable).
        resource_type: Type of resource involved (e.g., "Pod", "Deployment").
        resource_name: Name of the resource involved.
        namespace: Namespace of the resource (if applicable).
    """

    def __init__(
        self,
        message: str,
        status_code: int | None = None,
        resource_type: str | None = None,
        resource_name: str | None = None,
        namespace: str | None = None,
    ) -> None:
        """Initialize KubernetesError.

        Args:
            message: Human-readable error message.
            status_code: HTTP status code from Kubernetes API.
            resource_type: Type of resource involved.
            resource_name: Name of the resource involved.
            namespace: Namespace of the resource.
        """
        super().__init__(message)
        self.message = message
        self.status_code = status_code
        self.resource_type = resource_type
        self.resource_name = resource_name
        self.namespace = namespace

    def __str__(self) -> str:
        """Return string representation of the error."""
        parts = [self.message]
        if self.status_code:
            parts.append(f"(status: {self.status_code})")
        if self.resource_type and self.resource_name:
            loc = f"[{self.resource_type}/{self.resource_name}"
            if self.namespace:
                loc += f" in {self.namespace}"
            loc += "]"
            parts.append(loc)
        return " ".join(parts)


# =============================================================================
# Configuration Resolution
# =============================================================================


class KubeConfigError(KubernetesError):
    """Base exception for kubeconfig loading and profile resolution."""


class ConfigParseError(KubeConfigError):
    """Exception raised when a kubeconfig document is structurally invalid.

    Fatal to the load that produced it.
    """

    def __init__(
        self,
        message: str = "Invalid Kubernetes client configuration",
        path: str | None = None,
        original_error: Exception | None = None,
    ) -> None:
        """Initialize ConfigParseError.

        Args:
            message: Human-readable error message.
            path: Location of the offending configuration file.
            original_error: The parser or validation error that caused this error.
        """
        if path:
            message = f"{message} ({path})"
        super().__init__(message=message)
        self.path = path
        self.original_error = original_error


class MissingContextError(KubeConfigError):
    """Exception raised when no context was requested and none is current."""

    def __init__(
        self,
        message: str = (
            "No context name was specified, and the Kubernetes client "
            "configuration does not specify a current context"
        ),
    ) -> None:
        """Initialize MissingContextError."""
        super().__init__(message=message)


class _DanglingReferenceError(KubeConfigError):
    """A context, cluster or user referenced by name that does not exist."""

    reference_kind: str = ""

    def __init__(self, reference: str, context_name: str | None = None) -> None:
        """Initialize the error.

        Args:
            reference: Name that could not be found.
            context_name: Context whose resolution failed.
        """
        message = (
            f"Cannot find a {self.reference_kind} in the Kubernetes client "
            f"configuration named '{reference}'"
        )
        if context_name and context_name != reference:
            message += f" (referenced by context '{context_name}')"
        super().__init__(message=message)
        self.reference = reference
        self.context_name = context_name


class UnknownContextError(_DanglingReferenceError):
    """Exception raised when the requested context does not exist."""

    reference_kind = "context"

    def __init__(self, context_name: str) -> None:
        """Initialize UnknownContextError.

        Args:
            context_name: The context that was requested.
        """
        super().__init__(reference=context_name, context_name=context_name)


class UnknownClusterError(_DanglingReferenceError):
    """Exception raised when a context references a cluster that does not exist."""

    reference_kind = "cluster"


class UnknownUserError(_DanglingReferenceError):
    """Exception raised when a context references a user identity that does not exist."""

    reference_kind = "user identity"


class CredentialResolutionError(KubeConfigError):
    """Exception raised when certificate or token material cannot be resolved.

    This includes missing referenced files and material that does not parse
    as the expected certificate, key or token format.
    """

    def __init__(
        self,
        message: str = "Failed to resolve credential material",
        owner: str | None = None,
        original_error: Exception | None = None,
    ) -> None:
        """Initialize CredentialResolutionError.

        Args:
            message: Human-readable error message.
            owner: Name of the user identity or cluster that owns the material.
            original_error: The underlying I/O or parse error.
        """
        if owner:
            message = f"{message} for '{owner}'"
        super().__init__(message=message)
        self.owner = owner
        self.original_error = original_error


class AmbientIdentityUnavailableError(KubernetesError):
    """Exception raised when in-cluster service account material is absent.

    Expected outside a pod; callers may fall back to kubeconfig resolution.
    """

    def __init__(
        self,
        message: str = "Pod service account identity is not available",
        missing: list[str] | None = None,
    ) -> None:
        """Initialize AmbientIdentityUnavailableError.

        Args:
            message: Human-readable error message.
            missing: Names of the inputs that were not found.
        """
        self.missing = missing or []
        if self.missing:
            message = f"{message} (missing: {', '.join(self.missing)})"
        super().__init__(message=message)


# =============================================================================
# Routing and Streaming
# =============================================================================


class UnsupportedOperationError(KubernetesError):
    """Exception raised when no URL template serves the requested operation.

    Indicates a mismatch between the caller's parameters and the resource's
    declared API templates.
    """

    def __init__(
        self,
        kind: str | None,
        operation: str,
        parameters: list[str] | None = None,
    ) -> None:
        """Initialize UnsupportedOperationError.

        Args:
            kind: Resource kind the operation was requested for.
            operation: The requested operation.
            parameters: Path parameters that were supplied.
        """
        message = f"Resource kind '{kind or 'unknown'}' does not support operation '{operation}'"
        if parameters is not None:
            supplied = ", ".join(parameters) if parameters else "none"
            message += f" with path parameters: {supplied}"
        super().__init__(message=message, resource_type=kind)
        self.kind = kind
        self.operation = operation
        self.parameters = parameters or []


class MalformedWatchEventError(KubernetesError):
    """A watch stream line that is not a structurally valid event.

    Carried inside an error-typed watch event rather than raised, so the
    stream keeps flowing.
    """

    def __init__(self, message: str, line: str | None = None) -> None:
        """Initialize MalformedWatchEventError.

        Args:
            message: Description of the parse failure.
            line: The raw line that failed to parse.
        """
        super().__init__(message=message)
        self.line = line


# =============================================================================
# Transport Translation
# =============================================================================


class KubernetesConnectionError(KubernetesError):
    """Exception raised when connection to a Kubernetes API server fails.

    This includes network errors, TLS failures and request timeouts.
    """

    def __init__(
        self,
        message: str = "Failed to connect to Kubernetes cluster",
        original_error: Exception | None = None,
    ) -> None:
        """Initialize KubernetesConnectionError.

        Args:
            message: Human-readable error message.
            original_error: The original exception that caused this error.
        """
        super().__init__(message=message)
        self.original_error = original_error


class KubernetesApiError(KubernetesError):
    """Exception raised for an unsuccessful Kubernetes API response.

    Attributes:
        response_body: Decoded response body (usually a Status object).
    """

    def __init__(
        self,
        message: str = "Kubernetes API request failed",
        status_code: int | None = None,
        response_body: dict[str, Any] | None = None,
        resource_type: str | None = None,
        resource_name: str | None = None,
        namespace: str | None = None,
    ) -> None:
        """Initialize KubernetesApiError.

        Args:
            message: Human-readable error message.
            status_code: HTTP status code.
            response_body: Decoded response body.
            resource_type: Type of resource involved.
            resource_name: Name of the resource involved.
            namespace: Namespace of the resource.
        """
        super().__init__(
            message=message,
            status_code=status_code,
            resource_type=resource_type,
            resource_name=resource_name,
            namespace=namespace,
        )
        self.response_body = response_body or {}


class KubernetesAuthError(KubernetesApiError):
    """Exception raised when authentication or authorization fails (401/403)."""

    def __init__(
        self,
        message: str = "Kubernetes authentication/authorization failed",
        status_code: int | None = 401,
        reason: str | None = None,
        response_body: dict[str, Any] | None = None,
    ) -> None:
        """Initialize KubernetesAuthError.

        Args:
            message: Human-readable error message.
            status_code: HTTP status code (usually 401 or 403).
            reason: Kubernetes API reason string.
            response_body: Decoded response body.
        """
        super().__init__(message=message, status_code=status_code, response_body=response_body)
        self.reason = reason


class KubernetesNotFoundError(KubernetesApiError):
    """Exception raised when a requested Kubernetes resource is not found (404)."""

    def __init__(
        self,
        message: str = "Kubernetes resource not found",
        resource_type: str | None = None,
        resource_name: str | None = None,
        namespace: str | None = None,
        response_body: dict[str, Any] | None = None,
    ) -> None:
        """Initialize KubernetesNotFoundError.

        Args:
            message: Human-readable error message.
            resource_type: Type of resource (e.g., "Pod", "Deployment").
            resource_name: Name of the resource.
            namespace: Namespace of the resource.
            response_body: Decoded response body.
        """
        if resource_type and resource_name:
            message = f"{resource_type} '{resource_name}' not found"
            if namespace:
                message += f" in namespace '{namespace}'"
        super().__init__(
            message=message,
            status_code=404,
            response_body=response_body,
            resource_type=resource_type,
            resource_name=resource_name,
            namespace=namespace,
        )


class KubernetesConflictError(KubernetesApiError):
    """Exception raised when a resource conflict occurs (409).

    The resource already exists or was modified by another client.
    """

    def __init__(
        self,
        message: str = "Resource conflict",
        resource_type: str | None = None,
        resource_name: str | None = None,
        namespace: str | None = None,
        response_body: dict[str, Any] | None = None,
    ) -> None:
        """Initialize KubernetesConflictError.

        Args:
            message: Human-readable error message.
            resource_type: Type of resource.
            resource_name: Name of the resource.
            namespace: Namespace of the resource.
            response_body: Decoded response body.
        """
        if resource_type and resource_name:
            message = f"{resource_type} '{resource_name}' conflicts with the current state"
            if namespace:
                message += f" in namespace '{namespace}'"
        super().__init__(
            message=message,
            status_code=409,
            response_body=response_body,
            resource_type=resource_type,
            resource_name=resource_name,
            namespace=namespace,
        )


class KubernetesValidationError(KubernetesApiError):
    """Exception raised when the API rejects an invalid request (400/422)."""

    def __init__(
        self,
        message: str = "Invalid resource specification",
        validation_errors: list[dict[str, Any]] | None = None,
        status_code: int | None = 422,
        response_body: dict[str, Any] | None = None,
    ) -> None:
        """Initialize KubernetesValidationError.

        Args:
            message: Human-readable error message.
            validation_errors: Field causes reported by the API server.
            status_code: HTTP status code (usually 400 or 422).
            response_body: Decoded response body.
        """
        super().__init__(message=message, status_code=status_code, response_body=response_body)
        self.validation_errors = validation_errors or []
