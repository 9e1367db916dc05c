"""
Core data models for lasso-unpack analysis.

This module defines the dataclasses and enums shared by the decode pipeline:
the tagged call kinds produced by the classifier, the package identity produced
by the path decoder, and the manifest records accumulated by the walker.

Architecture principles:
1. Records mirror the manifest format - one record per recognized call
2. Identities never guess - missing pieces stay empty strings
3. Results distinguish "nothing there" from "nothing found"
"""

from dataclasses import dataclass, field
from typing import Any, Dict, List
from enum import Enum


class CallKind(Enum):
    """Kinds of registration calls found in a Lasso bundle."""

    DEF = "def"
    INSTALLED = "installed"
    MAIN = "main"
    REMAP = "remap"
    BUILTIN = "builtin"
    RUN = "run"
    LOADER_BOOTSTRAP = "functionExpression"

    @property
    def is_alias(self) -> bool:
        """Alias calls map one path onto another and carry no module body."""
        return self in (CallKind.MAIN, CallKind.REMAP, CallKind.BUILTIN)

    @property
    def emits_record(self) -> bool:
        """Whether calls of this kind produce a manifest record."""
        return self is not CallKind.RUN


# Verbs accessed on the module registry receiver, e.g. ``$_mod.def(...)``
REGISTRY_VERBS: Dict[str, CallKind] = {
    kind.value: kind for kind in CallKind if kind is not CallKind.LOADER_BOOTSTRAP
}


class UnpackStatus(Enum):
    """Outcome of walking one bundle."""

    OK = "ok"
    EMPTY_INPUT = "empty_input"


@dataclass(frozen=True)
class PathIdentity:
    """Package identity decoded from a synthetic Lasso path."""

    package_name: str = ""
    version: str = ""
    file_name: str = ""


# Fixed identity of the loader runtime wrapper at the top of every bundle
LOADER_IDENTITY = PathIdentity(package_name="module.js", version="", file_name="module.js")
LOADER_PATH = "/module.js"


@dataclass
class ManifestRecord:
    """One entry of the manifest, in the order its call appears in the bundle."""

    verb: CallKind
    size: int
    path: str = ""
    package_name: str = ""
    version: str = ""
    file_name: str = ""
    content: str = ""
    target: str = ""

    def apply_identity(self, identity: PathIdentity) -> None:
        self.package_name = identity.package_name
        self.version = identity.version
        self.file_name = identity.file_name

    def to_dict(self) -> Dict[str, Any]:
        """Convert to the manifest JSON shape."""
        data: Dict[str, Any] = {
            "type": self.verb.value,
            "path": self.path,
            "packageName": self.package_name,
            "fileName": self.file_name,
            "version": self.version,
            "size": self.size,
        }
        if self.verb is CallKind.DEF:
            data["content"] = self.content
        if self.target:
            data["target"] = self.target
        return data


@dataclass
class UnpackResult:
    """Records decoded from one bundle plus the walk outcome."""

    status: UnpackStatus
    records: List[ManifestRecord] = field(default_factory=list)

    @property
    def is_empty_input(self) -> bool:
        return self.status is UnpackStatus.EMPTY_INPUT

    def to_list(self) -> List[Dict[str, Any]]:
        return [record.to_dict() for record in self.records]


@dataclass(frozen=True)
class PackageSizeSummary:
    """Aggregated sizes of the module bodies defined for one package version."""

    package_name: str
    version: str
    module_count: int
    total_size: int
    gzip_size: int
