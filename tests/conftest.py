"""Shared pytest fixtures for kubeclient tests."""

from __future__ import annotations

import base64
import datetime
import os
from collections.abc import Callable
from dataclasses import dataclass
from pathlib import Path
from typing import Any

import pytest
import typer
import yaml
from cryptography import x509
from cryptography.hazmat.primitives import hashes
from cryptography.hazmat.primitives.asymmetric import ec
from cryptography.hazmat.primitives.serialization import (
    Encoding,
    NoEncryption,
    PrivateFormat,
)
from cryptography.x509.oid import NameOID
from typer.testing import CliRunner

from kubeclient.cli.main import app


@dataclass(frozen=True)
class CertificateMaterial:
    """A generated certificate and its private key, in PEM and DER."""

    cert_pem: bytes
    key_pem: bytes
    cert_der: bytes

    @property
    def cert_b64(self) -> str:
        """Base64-wrapped PEM, as kubeconfig ``*-data`` fields carry it."""
        return base64.b64encode(self.cert_pem).decode("ascii")

    @property
    def key_b64(self) -> str:
        return base64.b64encode(self.key_pem).decode("ascii")


def _generate(common_name: str, issuer: tuple[x509.Name, Any] | None = None) -> CertificateMaterial:
    key = ec.generate_private_key(ec.SECP256R1())
    subject = x509.Name([x509.NameAttribute(NameOID.COMMON_NAME, common_name)])
    issuer_name, issuer_key = issuer if issuer else (subject, key)
    now = datetime.datetime.now(datetime.UTC)
    cert = (
        x509.CertificateBuilder()
        .subject_name(subject)
        .issuer_name(issuer_name)
        .public_key(key.public_key())
        .serial_number(x509.random_serial_number())
        .not_valid_before(now - datetime.timedelta(minutes=5))
        .not_valid_after(now + datetime.timedelta(days=1))
        .add_extension(x509.BasicConstraints(ca=issuer is None, path_length=None), critical=True)
        .sign(issuer_key, hashes.SHA256())
    )
    return CertificateMaterial(
        cert_pem=cert.public_bytes(Encoding.PEM),
        key_pem=key.private_bytes(Encoding.PEM, PrivateFormat.TraditionalOpenSSL, NoEncryption()),
        cert_der=cert.public_bytes(Encoding.DER),
    )


@pytest.fixture(scope="session")
def ca_material() -> CertificateMaterial:
    """A self-signed CA certificate."""
    return _generate("kubeclient-test-ca")


@pytest.fixture(scope="session")
def client_material() -> CertificateMaterial:
    """A client certificate for the 'admin' user."""
    return _generate("admin")


@pytest.fixture
def write_kubeconfig(tmp_path: Path) -> Callable[[dict[str, Any]], Path]:
    """Return a factory writing a kubeconfig document to a temp file."""

    def _write(document: dict[str, Any], name: str = "config") -> Path:
        path = tmp_path / name
        path.write_text(yaml.safe_dump(document), encoding="utf-8")
        return path

    return _write


@pytest.fixture
def kubeconfig_document(ca_material: CertificateMaterial) -> dict[str, Any]:
    """A kubeconfig with a token context and a broken context."""
    return {
        "apiVersion": "v1",
        "kind": "Config",
        "current-context": "dev",
        "clusters": [
            {
                "name": "dev-cluster",
                "cluster": {
                    "server": "https://dev.example.com:6443",
                    "certificate-authority-data": ca_material.cert_b64,
                },
            },
            {
                "name": "local",
                "cluster": {"server": "http://127.0.0.1:8080", "insecure-skip-tls-verify": True},
            },
        ],
        "users": [
            {"name": "dev-user", "user": {"token": "dev-token"}},
        ],
        "contexts": [
            {"name": "dev", "context": {"cluster": "dev-cluster", "user": "dev-user"}},
            {
                "name": "local",
                "context": {"cluster": "local", "user": "dev-user", "namespace": "sandbox"},
            },
            {"name": "broken", "context": {"cluster": "missing", "user": "dev-user"}},
        ],
    }


@pytest.fixture
def cli_runner() -> CliRunner:
    """Create a Typer CLI test runner."""
    return CliRunner()


@pytest.fixture
def cli_app() -> typer.Typer:
    """Return the CLI app for testing."""
    return app


@pytest.fixture(autouse=True)
def reset_environment(monkeypatch: pytest.MonkeyPatch, tmp_path: Path) -> None:
    """Isolate each test from the caller's environment and log directory."""
    for key in list(os.environ.keys()):
        if key.startswith(("KUBECLIENT_", "KUBERNETES_SERVICE_")):
            monkeypatch.delenv(key, raising=False)
    monkeypatch.setattr("kubeclient.logging.config.LOG_DIR", tmp_path / "logs")
