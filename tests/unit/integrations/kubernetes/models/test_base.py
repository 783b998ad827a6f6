"""Unit tests for Kubernetes base models."""

from __future__ import annotations

from datetime import UTC, datetime

import pytest

from kubeclient.integrations.kubernetes.models import (
    BUNDLED_RESOURCES,
    ConfigMapV1,
    KubeResourceList,
    ObjectMeta,
    PodListV1,
    PodV1,
    Status,
)


@pytest.mark.unit
@pytest.mark.kubernetes
class TestKubeModel:
    """Test wire-format handling shared by every model."""

    def test_camel_case_aliases(self) -> None:
        """Test camelCase wire names populate snake_case fields."""
        meta = ObjectMeta.model_validate(
            {
                "name": "web-0",
                "resourceVersion": "42",
                "creationTimestamp": "2024-01-02T03:04:05Z",
                "ownerReferences": [
                    {"kind": "ReplicaSet", "name": "web", "blockOwnerDeletion": True}
                ],
            }
        )
        assert meta.resource_version == "42"
        assert meta.creation_timestamp == datetime(2024, 1, 2, 3, 4, 5, tzinfo=UTC)
        assert meta.owner_references is not None
        assert meta.owner_references[0].block_owner_deletion is True

    def test_to_manifest_uses_wire_names(self) -> None:
        """Test manifests use camelCase and omit unset fields."""
        pod = PodV1.model_validate(
            {"metadata": {"name": "web-0"}, "status": {"podIP": "10.0.0.7", "phase": "Running"}}
        )
        manifest = pod.to_manifest()
        assert manifest["status"] == {"podIP": "10.0.0.7", "phase": "Running"}
        assert "kind" not in manifest

    def test_unknown_fields_are_kept(self) -> None:
        """Test fields without a declared schema survive a round trip."""
        config_map = ConfigMapV1.model_validate(
            {"metadata": {"name": "c"}, "data": {"k": "v"}, "immutable": True}
        )
        assert config_map.to_manifest()["immutable"] is True

    def test_resource_accessors(self) -> None:
        """Test name and namespace shortcuts."""
        pod = PodV1(metadata=ObjectMeta(name="web-0", namespace="ops"))
        assert (pod.name, pod.namespace) == ("web-0", "ops")
        assert PodV1().name is None


@pytest.mark.unit
@pytest.mark.kubernetes
class TestKubeResourceList:
    """Test list responses."""

    def test_typed_items(self) -> None:
        """Test list items are parsed into the element type."""
        body = {
            "kind": "PodList",
            "apiVersion": "v1",
            "metadata": {"resourceVersion": "7", "continue": "next-page"},
            "items": [{"metadata": {"name": "a"}}, {"metadata": {"name": "b"}}],
        }

        pods = PodListV1.model_validate(body)

        assert [p.name for p in pods.items] == ["a", "b"]
        assert all(isinstance(p, PodV1) for p in pods.items)
        assert pods.metadata.continue_ == "next-page"
        assert pods.metadata.resource_version == "7"

    def test_parametrized_generic(self) -> None:
        """Test the generic list can be parametrized at runtime."""
        configmaps = KubeResourceList[ConfigMapV1].model_validate(
            {"items": [{"metadata": {"name": "c"}, "data": {"a": "1"}}]}
        )
        assert isinstance(configmaps.items[0], ConfigMapV1)
        assert configmaps.items[0].data == {"a": "1"}

    def test_continue_alias_on_output(self) -> None:
        """Test the continue token serializes under its wire name."""
        pods = PodListV1.model_validate({"metadata": {"continue": "x"}})
        assert pods.to_manifest()["metadata"] == {"continue": "x"}


@pytest.mark.unit
@pytest.mark.kubernetes
class TestStatusAndBundledResources:
    """Test Status and the kind lookup table."""

    def test_status(self) -> None:
        """Test a failure Status with causes."""
        status = Status.model_validate(
            {
                "kind": "Status",
                "status": "Failure",
                "reason": "Invalid",
                "code": 422,
                "details": {"causes": [{"field": "spec", "message": "required"}]},
            }
        )
        assert status.code == 422
        assert status.details is not None
        assert status.details.causes is not None
        assert status.details.causes[0].field == "spec"

    def test_bundled_resources_by_kind(self) -> None:
        """Test bundled resource types are keyed by lowercase kind."""
        assert BUNDLED_RESOURCES["pod"] is PodV1
        assert BUNDLED_RESOURCES["configmap"] is ConfigMapV1
        assert "role" in BUNDLED_RESOURCES
        assert "storageclass" in BUNDLED_RESOURCES
