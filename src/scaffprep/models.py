import enum
import posixpath
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any

from .errors import InputError

CLOUD_HOST = "bitbucket.org"


class Topology(enum.Enum):
    CLOUD = "cloud"
    SELF_HOSTED = "self-hosted"


@dataclass(frozen=True)
class TemplateDescriptor:
    name: str
    path: str | None = None
    annotations: dict[str, str] = field(default_factory=dict)

    @classmethod
    def from_entity(cls, entity: dict[str, Any]) -> "TemplateDescriptor":
        metadata = entity.get("metadata") or {}
        spec = entity.get("spec") or {}
        name = metadata.get("name")
        if not name:
            raise InputError("Template entity has no metadata.name")
        return cls(
            name=str(name),
            path=spec.get("path"),
            annotations=dict(metadata.get("annotations") or {}),
        )


@dataclass(frozen=True)
class LocationAnnotation:
    protocol: str
    location: str


@dataclass(frozen=True)
class RepositoryRef:
    scheme: str
    host: str
    owner: str
    name: str
    filepath: str
    topology: Topology
    user: str | None = None

    @property
    def checkout_url(self) -> str:
        # ssh keeps its login (git@...); user is never set for http(s)
        netloc = f"{self.user}@{self.host}" if self.user else self.host
        if self.topology is Topology.CLOUD:
            return f"{self.scheme}://{netloc}/{self.owner}/{self.name}"
        return f"{self.scheme}://{netloc}/scm/{self.owner}/{self.name}"

    @property
    def directory(self) -> str:
        # posixpath.dirname("") and dirname("file") both give ""
        return posixpath.dirname(self.filepath) or "."


@dataclass(frozen=True)
class Credentials:
    username: str
    token: str

    def __repr__(self) -> str:
        return f"Credentials(username={self.username!r}, token='***')"


@dataclass(frozen=True)
class PreparerOptions:
    working_directory: Path | str | None = None
