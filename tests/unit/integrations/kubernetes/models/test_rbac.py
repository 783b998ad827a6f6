"""Unit tests for RBAC and storage models."""

from __future__ import annotations

import pytest
from pydantic import ValidationError

from kubeclient.integrations.kubernetes.models import (
    PolicyRuleV1Beta1,
    RoleBindingV1Beta1,
    StorageClassV1,
)


@pytest.mark.unit
@pytest.mark.kubernetes
class TestRbacModels:
    """Test RBAC model wire names and required fields."""

    def test_policy_rule_irregular_alias(self) -> None:
        """Test nonResourceURLs keeps its upper-case wire name."""
        rule = PolicyRuleV1Beta1.model_validate(
            {"verbs": ["get"], "nonResourceURLs": ["/healthz"], "apiGroups": [""]}
        )
        assert rule.non_resource_urls == ["/healthz"]
        assert rule.api_groups == [""]
        assert rule.to_manifest()["nonResourceURLs"] == ["/healthz"]

    def test_role_binding(self) -> None:
        """Test a role binding with subjects."""
        binding = RoleBindingV1Beta1.model_validate(
            {
                "metadata": {"name": "read-pods", "namespace": "ops"},
                "roleRef": {
                    "apiGroup": "rbac.authorization.k8s.io",
                    "kind": "Role",
                    "name": "reader",
                },
                "subjects": [{"kind": "User", "name": "jane"}],
            }
        )
        assert binding.role_ref.name == "reader"
        assert binding.subjects[0].name == "jane"

    def test_role_binding_requires_role_ref(self) -> None:
        """Test roleRef is required."""
        with pytest.raises(ValidationError):
            RoleBindingV1Beta1.model_validate({"metadata": {"name": "x"}})


@pytest.mark.unit
@pytest.mark.kubernetes
class TestStorageModels:
    """Test storage class models."""

    def test_storage_class(self) -> None:
        """Test storage class fields."""
        storage_class = StorageClassV1.model_validate(
            {
                "metadata": {"name": "fast"},
                "provisioner": "ebs.csi.aws.com",
                "allowVolumeExpansion": True,
                "parameters": {"type": "gp3"},
            }
        )
        assert storage_class.allow_volume_expansion is True
        assert storage_class.mount_options == []
