"""Unit tests for Kubernetes exceptions."""

from __future__ import annotations

import pytest

from kubeclient.integrations.kubernetes.exceptions import (
    AmbientIdentityUnavailableError,
    ConfigParseError,
    CredentialResolutionError,
    KubeConfigError,
    KubernetesApiError,
    KubernetesAuthError,
    KubernetesConflictError,
    KubernetesConnectionError,
    KubernetesError,
    KubernetesNotFoundError,
    KubernetesValidationError,
    MalformedWatchEventError,
    MissingContextError,
    UnknownClusterError,
    UnknownContextError,
    UnknownUserError,
    UnsupportedOperationError,
)


@pytest.mark.unit
@pytest.mark.kubernetes
class TestKubernetesError:
    """Test KubernetesError base exception."""

    def test_init_minimal(self) -> None:
        """Test initialization with minimal arguments."""
        error = KubernetesError("Something went wrong")
        assert error.message == "Something went wrong"
        assert error.status_code is None
        assert error.resource_type is None
        assert error.resource_name is None
        assert error.namespace is None

    def test_str_message_only(self) -> None:
        """Test string representation with message only."""
        assert str(KubernetesError("Test error")) == "Test error"

    def test_str_with_resource(self) -> None:
        """Test string representation with status and resource location."""
        error = KubernetesError(
            "Failed", status_code=500, resource_type="Pod", resource_name="web", namespace="ops"
        )
        assert str(error) == "Failed (status: 500) [Pod/web in ops]"


@pytest.mark.unit
@pytest.mark.kubernetes
class TestConfigurationErrors:
    """Test kubeconfig resolution errors."""

    def test_hierarchy(self) -> None:
        """Test every resolution error is a KubeConfigError."""
        for error_type in (
            ConfigParseError,
            MissingContextError,
            UnknownContextError,
            UnknownClusterError,
            UnknownUserError,
            CredentialResolutionError,
        ):
            assert issubclass(error_type, KubeConfigError)
        assert not issubclass(AmbientIdentityUnavailableError, KubeConfigError)

    def test_config_parse_error_path(self) -> None:
        """Test the file path is appended to the message."""
        cause = ValueError("bad")
        error = ConfigParseError("Broken", path="/tmp/config", original_error=cause)
        assert error.message == "Broken (/tmp/config)"
        assert error.original_error is cause

    def test_unknown_context(self) -> None:
        """Test the unknown context message names the context once."""
        error = UnknownContextError("staging")
        assert error.message == (
            "Cannot find a context in the Kubernetes client configuration named 'staging'"
        )
        assert error.reference == "staging"

    def test_unknown_cluster_names_context(self) -> None:
        """Test dangling cluster references name the referring context."""
        error = UnknownClusterError("gone", context_name="prod")
        assert "cluster" in error.message
        assert "'gone'" in error.message
        assert "context 'prod'" in error.message

    def test_unknown_user(self) -> None:
        """Test dangling user references."""
        error = UnknownUserError("ghost", context_name="dev")
        assert "user identity" in error.message
        assert error.context_name == "dev"

    def test_credential_error_owner(self) -> None:
        """Test the owning user or cluster is named."""
        error = CredentialResolutionError("Invalid client key", owner="admin")
        assert error.message == "Invalid client key for 'admin'"
        assert error.owner == "admin"

    def test_ambient_identity_missing(self) -> None:
        """Test missing inputs are listed."""
        error = AmbientIdentityUnavailableError(missing=["A", "B"])
        assert error.missing == ["A", "B"]
        assert error.message.endswith("(missing: A, B)")


@pytest.mark.unit
@pytest.mark.kubernetes
class TestRoutingErrors:
    """Test routing and streaming errors."""

    def test_unsupported_operation(self) -> None:
        """Test the message names kind, operation and parameters."""
        error = UnsupportedOperationError("Role", "get", ["namespace"])
        assert error.message == (
            "Resource kind 'Role' does not support operation 'get' "
            "with path parameters: namespace"
        )
        assert error.resource_type == "Role"

    def test_unsupported_operation_no_parameters(self) -> None:
        """Test an empty parameter list reads as 'none'."""
        error = UnsupportedOperationError(None, "create", [])
        assert "'unknown'" in error.message
        assert error.message.endswith("with path parameters: none")

    def test_malformed_watch_event(self) -> None:
        """Test the raw line is kept."""
        error = MalformedWatchEventError("Invalid JSON", line="{oops")
        assert error.line == "{oops"


@pytest.mark.unit
@pytest.mark.kubernetes
class TestApiErrors:
    """Test API response errors."""

    def test_api_errors_share_base(self) -> None:
        """Test status-specific errors are KubernetesApiErrors."""
        for error_type in (
            KubernetesAuthError,
            KubernetesNotFoundError,
            KubernetesConflictError,
            KubernetesValidationError,
        ):
            assert issubclass(error_type, KubernetesApiError)

    def test_connection_error(self) -> None:
        """Test the original error is kept."""
        cause = OSError("refused")
        error = KubernetesConnectionError(original_error=cause)
        assert error.original_error is cause
        assert error.message == "Failed to connect to Kubernetes cluster"

    def test_auth_error(self) -> None:
        """Test auth errors default to 401 and keep the reason."""
        error = KubernetesAuthError(reason="Forbidden")
        assert error.status_code == 401
        assert error.reason == "Forbidden"
        assert error.response_body == {}

    def test_not_found_message(self) -> None:
        """Test the not-found message names the resource."""
        error = KubernetesNotFoundError(resource_type="Pod", resource_name="web", namespace="ops")
        assert error.message == "Pod 'web' not found in namespace 'ops'"
        assert error.status_code == 404

    def test_conflict_message(self) -> None:
        """Test the conflict message names the resource."""
        error = KubernetesConflictError(resource_type="ConfigMap", resource_name="settings")
        assert error.message == "ConfigMap 'settings' conflicts with the current state"
        assert error.status_code == 409

    def test_validation_error(self) -> None:
        """Test field causes are kept."""
        causes = [{"field": "spec.replicas", "message": "must be >= 0"}]
        error = KubernetesValidationError("Invalid", validation_errors=causes, status_code=400)
        assert error.validation_errors == causes
        assert error.status_code == 400
