"""Kubernetes client configuration (kubeconfig) document models.

A kubeconfig document holds named clusters, named user identities and named
contexts pairing the two. Contexts refer to clusters and users by name only;
those references are checked when a connection profile is resolved, not when
the document is loaded, so a document with a few broken contexts can still
serve its valid ones.
"""

from __future__ import annotations

from pathlib import Path
from typing import Any, ClassVar
from urllib.parse import urlparse

import structlog
import yaml
from pydantic import BaseModel, ConfigDict, Field, ValidationError, field_validator, model_validator

from kubeclient.integrations.kubernetes.exceptions import ConfigParseError

logger = structlog.get_logger()


def default_kube_config_path() -> Path:
    """Return the default kubeconfig location (``~/.kube/config``)."""
    return Path.home() / ".kube" / "config"


class _NamedEntry(BaseModel):
    """Base for list entries that wrap their settings in a named sub-mapping.

    The standard layout is ``{name: ..., cluster: {...}}``; the settings are
    lifted to the top level so both nested and flattened layouts validate.
    """

    model_config = ConfigDict(frozen=True, populate_by_name=True, extra="ignore")

    _section: ClassVar[str] = ""

    name: str

    @model_validator(mode="before")
    @classmethod
    def lift_section(cls, data: Any) -> Any:
        """Merge the nested settings mapping into the entry."""
        if isinstance(data, dict) and isinstance(data.get(cls._section), dict):
            flattened = {k: v for k, v in data.items() if k != cls._section}
            flattened.update(data[cls._section])
            return flattened
        return data

    @field_validator("name")
    @classmethod
    def validate_name(cls, v: str) -> str:
        """Validate name is not blank."""
        if not v.strip():
            raise ValueError("name must not be empty")
        return v


class ClusterEntry(_NamedEntry):
    """A named API server endpoint and its TLS trust material."""

    _section: ClassVar[str] = "cluster"

    server: str
    certificate_authority_data: str | None = Field(default=None, alias="certificate-authority-data")
    certificate_authority: str | None = Field(default=None, alias="certificate-authority")
    insecure_skip_tls_verify: bool = Field(default=False, alias="insecure-skip-tls-verify")

    @field_validator("server")
    @classmethod
    def validate_server(cls, v: str) -> str:
        """Validate server is an absolute http(s) URI."""
        parsed = urlparse(v)
        if parsed.scheme not in ("http", "https") or not parsed.netloc:
            raise ValueError(f"server must be an absolute http:// or https:// URI, got {v!r}")
        return v


class ExecProvider(BaseModel):
    """External credential plugin declaration.

    Retained so documents that use one still load; the command is never run.
    """

    model_config = ConfigDict(frozen=True, populate_by_name=True, extra="ignore")

    command: str
    args: tuple[str, ...] = ()
    api_version: str | None = Field(default=None, alias="apiVersion")


class UserIdentity(_NamedEntry):
    """A named credential: client certificate, bearer token, or both."""

    _section: ClassVar[str] = "user"

    client_certificate_data: str | None = Field(default=None, alias="client-certificate-data")
    client_certificate: str | None = Field(default=None, alias="client-certificate")
    client_key_data: str | None = Field(default=None, alias="client-key-data", repr=False)
    client_key: str | None = Field(default=None, alias="client-key")
    token: str | None = Field(default=None, repr=False)
    token_file: str | None = Field(default=None, alias="tokenFile")
    exec_provider: ExecProvider | None = Field(default=None, alias="exec")


class Context(_NamedEntry):
    """A named pairing of a cluster and a user identity."""

    _section: ClassVar[str] = "context"

    cluster: str
    user: str
    namespace: str | None = None


class KubeConfigDocument(BaseModel):
    """A parsed kubeconfig document.

    Immutable; loading the same file again produces a new, independent document.
    """

    model_config = ConfigDict(frozen=True, populate_by_name=True, extra="ignore")

    clusters: tuple[ClusterEntry, ...] = ()
    users: tuple[UserIdentity, ...] = ()
    contexts: tuple[Context, ...] = ()
    current_context: str | None = Field(default=None, alias="current-context")
    source_path: Path | None = Field(default=None, exclude=True)

    @field_validator("clusters", "users", "contexts", mode="before")
    @classmethod
    def validate_sections(cls, v: Any) -> Any:
        """Treat an explicit null section as empty."""
        return () if v is None else v

    @field_validator("current_context")
    @classmethod
    def validate_current_context(cls, v: str | None) -> str | None:
        """Normalise an empty current context to None."""
        return v or None

    @model_validator(mode="after")
    def validate_unique_names(self) -> KubeConfigDocument:
        """Validate that names are unique within each section."""
        for section in ("clusters", "users", "contexts"):
            seen: set[str] = set()
            for entry in getattr(self, section):
                if entry.name in seen:
                    raise ValueError(f"duplicate name '{entry.name}' in {section}")
                seen.add(entry.name)
        return self

    # =========================================================================
    # Lookup
    # =========================================================================

    def get_cluster(self, name: str) -> ClusterEntry | None:
        """Find a cluster by name."""
        return next((c for c in self.clusters if c.name == name), None)

    def get_user(self, name: str) -> UserIdentity | None:
        """Find a user identity by name."""
        return next((u for u in self.users if u.name == name), None)

    def get_context(self, name: str) -> Context | None:
        """Find a context by name."""
        return next((c for c in self.contexts if c.name == name), None)

    @property
    def context_names(self) -> list[str]:
        """Names of all contexts, in document order."""
        return [c.name for c in self.contexts]

    @property
    def base_dir(self) -> Path:
        """Directory that relative credential file references resolve against."""
        if self.source_path is not None:
            return self.source_path.parent
        return Path.cwd()

    # =========================================================================
    # Loading
    # =========================================================================

    @classmethod
    def from_yaml(cls, text: str, source_path: Path | None = None) -> KubeConfigDocument:
        """Parse a kubeconfig document from YAML (or JSON) text.

        Args:
            text: Document content.
            source_path: File the content was read from, if any.

        Returns:
            The parsed document.

        Raises:
            ConfigParseError: If the document is structurally invalid.
        """
        location = str(source_path) if source_path else None
        try:
            raw = yaml.safe_load(text)
        except yaml.YAMLError as e:
            raise ConfigParseError(
                "Kubernetes client configuration is not valid YAML",
                path=location,
                original_error=e,
            ) from e

        if raw is None:
            raw = {}
        if not isinstance(raw, dict):
            raise ConfigParseError(
                f"Kubernetes client configuration must be a mapping, got {type(raw).__name__}",
                path=location,
            )

        try:
            document = cls.model_validate({**raw, "source_path": source_path})
        except ValidationError as e:
            raise ConfigParseError(
                f"Invalid Kubernetes client configuration: {_summarize_errors(e)}",
                path=location,
                original_error=e,
            ) from e

        logger.debug(
            "kubeconfig_parsed",
            path=location,
            clusters=len(document.clusters),
            users=len(document.users),
            contexts=len(document.contexts),
            current_context=document.current_context,
        )
        return document


def _summarize_errors(error: ValidationError) -> str:
    """Render pydantic validation errors as ``loc: msg`` pairs."""
    return "; ".join(
        f"{'.'.join(str(part) for part in err['loc'])}: {err['msg']}" for err in error.errors()
    )


def load_kube_config(path: str | Path | None = None) -> KubeConfigDocument:
    """Load a kubeconfig document from disk.

    Args:
        path: File to load; defaults to ``~/.kube/config``.

    Returns:
        The parsed document.

    Raises:
        ConfigParseError: If the file cannot be read or is structurally invalid.
    """
    config_path = Path(path).expanduser() if path else default_kube_config_path()
    try:
        text = config_path.read_text(encoding="utf-8")
    except OSError as e:
        raise ConfigParseError(
            "Cannot read Kubernetes client configuration",
            path=str(config_path),
            original_error=e,
        ) from e

    logger.debug("loading_kubeconfig", path=str(config_path))
    return KubeConfigDocument.from_yaml(text, source_path=config_path)
