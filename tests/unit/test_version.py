"""Tests for version module."""

from __future__ import annotations

import pytest

from kubeclient import __version__


class TestVersion:
    """Test version information."""

    @pytest.mark.unit
    def test_version_format(self) -> None:
        """Test version follows semantic versioning."""
        parts = __version__.split(".")
        assert len(parts) >= 2, "Version should have at least major.minor"
        assert all(part.isdigit() for part in parts[:2]), "Major and minor should be numeric"
