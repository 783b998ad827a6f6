"""Credential material resolution for kubeconfig entries.

Certificates, keys and tokens may be given inline or as file references. File
references are read relative to the kubeconfig's directory. Inline material
takes precedence when both are present.
"""

from __future__ import annotations

import base64
import binascii
from dataclasses import dataclass, field
from pathlib import Path
from typing import TYPE_CHECKING

import structlog
from cryptography import x509
from cryptography.hazmat.primitives.serialization import (
    Encoding,
    NoEncryption,
    PrivateFormat,
    load_der_private_key,
    load_pem_private_key,
)

from kubeclient.integrations.kubernetes.exceptions import CredentialResolutionError

if TYPE_CHECKING:
    from kubeclient.integrations.kubernetes.kubeconfig import ClusterEntry, UserIdentity

logger = structlog.get_logger()

_PEM_MARKER = b"-----BEGIN"


@dataclass(frozen=True)
class ClientCertificate:
    """A PEM client certificate chain with its PEM (PKCS#8) private key."""

    certificate_pem: bytes
    key_pem: bytes = field(repr=False)

    def load_certificate(self) -> x509.Certificate:
        """Parse the leaf certificate."""
        return x509.load_pem_x509_certificate(self.certificate_pem)

    @property
    def subject(self) -> str:
        """RFC 4514 subject of the leaf certificate."""
        return self.load_certificate().subject.rfc4514_string()


def _unwrap(raw: bytes) -> bytes:
    """Strip a base64 wrapper around PEM or DER content, if there is one."""
    if _PEM_MARKER in raw:
        return raw
    try:
        return base64.b64decode(b"".join(raw.split()), validate=True)
    except (binascii.Error, ValueError):
        return raw


def load_certificates_pem(raw: bytes, owner: str, what: str = "certificate") -> bytes:
    """Parse one or more certificates and return them as a PEM bundle.

    Accepts PEM, base64-wrapped PEM and (base64-wrapped) DER.

    Raises:
        CredentialResolutionError: If no certificate can be parsed.
    """
    data = _unwrap(raw)
    try:
        if _PEM_MARKER in data:
            certificates = x509.load_pem_x509_certificates(data)
        else:
            certificates = [x509.load_der_x509_certificate(data)]
    except ValueError as e:
        raise CredentialResolutionError(f"Invalid {what}", owner=owner, original_error=e) from e
    return b"".join(cert.public_bytes(Encoding.PEM) for cert in certificates)


def load_private_key_pem(raw: bytes, owner: str) -> bytes:
    """Parse an unencrypted private key and return it as PKCS#8 PEM.

    Raises:
        CredentialResolutionError: If the key cannot be parsed or is encrypted.
    """
    data = _unwrap(raw)
    try:
        if _PEM_MARKER in data:
            key = load_pem_private_key(data, password=None)
        else:
            key = load_der_private_key(data, password=None)
    except (ValueError, TypeError) as e:
        raise CredentialResolutionError(
            "Invalid client key", owner=owner, original_error=e
        ) from e
    return key.private_bytes(Encoding.PEM, PrivateFormat.PKCS8, NoEncryption())


class CredentialResolver:
    """Resolves certificate and token material for users and clusters.

    Example:
        ```python
        resolver = CredentialResolver(document.base_dir)
        ca_pem = resolver.resolve_ca_certificate(cluster)
        token = resolver.resolve_bearer_token(user)
        ```
    """

    def __init__(self, base_dir: Path) -> None:
        """Initialize the resolver.

        Args:
            base_dir: Directory that relative file references resolve against.
        """
        self._base_dir = base_dir

    def _read_file(self, reference: str, owner: str, what: str) -> bytes:
        path = Path(reference).expanduser()
        if not path.is_absolute():
            path = self._base_dir / path
        try:
            return path.read_bytes()
        except OSError as e:
            raise CredentialResolutionError(
                f"Cannot read {what} file '{path}'", owner=owner, original_error=e
            ) from e

    def _material(
        self,
        inline: str | None,
        reference: str | None,
        owner: str,
        what: str,
    ) -> bytes | None:
        """Return inline material if present, else the referenced file's bytes."""
        if inline:
            return inline.encode("utf-8")
        if reference:
            return self._read_file(reference, owner, what)
        return None

    def resolve_client_certificate(self, user: UserIdentity) -> ClientCertificate | None:
        """Resolve the client certificate and key for a user identity.

        Returns:
            The certificate and key, or None if the user has neither.

        Raises:
            CredentialResolutionError: If only one of certificate and key is
                present, or either is unreadable or invalid.
        """
        cert = self._material(
            user.client_certificate_data, user.client_certificate, user.name, "client certificate"
        )
        key = self._material(user.client_key_data, user.client_key, user.name, "client key")
        if cert is None and key is None:
            return None
        if cert is None or key is None:
            raise CredentialResolutionError(
                "Client certificate and client key must be provided together", owner=user.name
            )

        return ClientCertificate(
            certificate_pem=load_certificates_pem(cert, user.name, "client certificate"),
            key_pem=load_private_key_pem(key, user.name),
        )

    def resolve_ca_certificate(self, cluster: ClusterEntry) -> bytes | None:
        """Resolve the CA bundle a cluster's server certificate is verified against.

        Returns:
            PEM bundle, or None if the cluster declares no CA.
        """
        raw = self._material(
            cluster.certificate_authority_data,
            cluster.certificate_authority,
            cluster.name,
            "certificate authority",
        )
        if raw is None:
            return None
        return load_certificates_pem(raw, cluster.name, "certificate authority")

    def resolve_bearer_token(self, user: UserIdentity) -> str | None:
        """Resolve the bearer token for a user identity.

        Returns:
            The token, or None if the user has no static token.
        """
        if user.token:
            return user.token

        if user.token_file:
            raw = self._read_file(user.token_file, user.name, "token")
            try:
                token = raw.decode("utf-8").strip()
            except UnicodeDecodeError as e:
                raise CredentialResolutionError(
                    f"Token file '{user.token_file}' is not valid UTF-8",
                    owner=user.name,
                    original_error=e,
                ) from e
            if not token:
                raise CredentialResolutionError(
                    f"Token file '{user.token_file}' is empty", owner=user.name
                )
            return token

        if user.exec_provider is not None:
            logger.warning(
                "exec_credential_provider_not_supported",
                user=user.name,
                command=user.exec_provider.command,
            )
        return None
