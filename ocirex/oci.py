"""OCI image manifest and index structures."""

from __future__ import annotations

import json
from dataclasses import dataclass, field
from typing import Any

from .digest import Digest
from .errors import ValidationError


def _mapping(value: Any, where: str) -> dict[str, Any]:
    if not isinstance(value, dict):
        raise ValidationError(f"{where} must be a JSON object")
    return value


def _field(data: dict[str, Any], key: str, kind: type, where: str, required: bool = True) -> Any:
    value = data.get(key)
    if value is None:
        if required:
            raise ValidationError(f"{where}: missing required field '{key}'")
        return None
    if kind is int:
        if isinstance(value, bool) or not isinstance(value, int) or value < 0:
            raise ValidationError(f"{where}: field '{key}' must be a non-negative integer")
    elif not isinstance(value, kind):
        raise ValidationError(f"{where}: field '{key}' has the wrong type")
    return value


def _strings(data: dict[str, Any], key: str, where: str) -> list[str]:
    values = _field(data, key, list, where, required=False) or []
    if not all(isinstance(item, str) for item in values):
        raise ValidationError(f"{where}: field '{key}' must hold strings")
    return list(values)


def _annotations(data: dict[str, Any], where: str) -> dict[str, str]:
    values = _field(data, "annotations", dict, where, required=False) or {}
    if not all(isinstance(k, str) and isinstance(v, str) for k, v in values.items()):
        raise ValidationError(f"{where}: annotations must map strings to strings")
    return dict(values)


@dataclass
class Platform:
    """The platform an image runs on."""

    architecture: str
    os: str
    os_version: str | None = None
    os_features: list[str] = field(default_factory=list)
    variant: str | None = None

    @classmethod
    def from_dict(cls, data: Any) -> Platform:
        """Build a platform from its JSON object."""
        where = "platform"
        data = _mapping(data, where)
        return cls(
            architecture=_field(data, "architecture", str, where),
            os=_field(data, "os", str, where),
            os_version=_field(data, "os.version", str, where, required=False),
            os_features=_strings(data, "os.features", where),
            variant=_field(data, "variant", str, where, required=False),
        )


@dataclass
class Descriptor:
    """A reference to content by media type, digest and size."""

    media_type: str
    digest: Digest
    size: int
    platform: Platform | None = None
    urls: list[str] = field(default_factory=list)
    annotations: dict[str, str] = field(default_factory=dict)

    @classmethod
    def from_dict(cls, data: Any) -> Descriptor:
        """Build a descriptor from its JSON object."""
        where = "descriptor"
        data = _mapping(data, where)
        platform = data.get("platform")
        return cls(
            media_type=_field(data, "mediaType", str, where),
            digest=Digest.parse(_field(data, "digest", str, where)),
            size=_field(data, "size", int, where),
            platform=None if platform is None else Platform.from_dict(platform),
            urls=_strings(data, "urls", where),
            annotations=_annotations(data, where),
        )


@dataclass
class ImageManifest:
    """A single-platform image manifest."""

    schema_version: int
    config: Descriptor
    layers: list[Descriptor]
    media_type: str | None = None
    artifact_type: str | None = None
    annotations: dict[str, str] = field(default_factory=dict)

    @classmethod
    def from_dict(cls, data: Any) -> ImageManifest:
        """Build a manifest from its JSON object."""
        where = "image manifest"
        data = _mapping(data, where)
        layers = _field(data, "layers", list, where)
        return cls(
            schema_version=_field(data, "schemaVersion", int, where),
            config=Descriptor.from_dict(_field(data, "config", dict, where)),
            layers=[Descriptor.from_dict(layer) for layer in layers],
            media_type=_field(data, "mediaType", str, where, required=False),
            artifact_type=_field(data, "artifactType", str, where, required=False),
            annotations=_annotations(data, where),
        )


@dataclass
class ImageIndex:
    """A multi-platform image index."""

    schema_version: int
    manifests: list[Descriptor]
    media_type: str | None = None
    artifact_type: str | None = None
    annotations: dict[str, str] = field(default_factory=dict)

    @classmethod
    def from_dict(cls, data: Any) -> ImageIndex:
        """Build an index from its JSON object."""
        where = "image index"
        data = _mapping(data, where)
        manifests = _field(data, "manifests", list, where)
        return cls(
            schema_version=_field(data, "schemaVersion", int, where),
            manifests=[Descriptor.from_dict(item) for item in manifests],
            media_type=_field(data, "mediaType", str, where, required=False),
            artifact_type=_field(data, "artifactType", str, where, required=False),
            annotations=_annotations(data, where),
        )


def _build(kind: type, value: Any, message: str) -> Any:
    try:
        return kind.from_dict(value)
    except ValidationError as exc:
        raise ValidationError(f"{message}: {exc.message}", exc) from exc


@dataclass
class ManifestOrIndex:
    """Either a single-platform manifest or a multi-platform index."""

    content: ImageManifest | ImageIndex

    @classmethod
    def from_bytes(cls, data: bytes | str) -> ManifestOrIndex:
        """Parse manifest JSON, detecting whether it is a manifest or an index."""
        try:
            value = json.loads(data)
        except ValueError as exc:
            raise ValidationError("Failed to parse manifest JSON", exc) from exc

        is_object = isinstance(value, dict)
        media_type = value.get("mediaType") if is_object else None
        if not isinstance(media_type, str):
            media_type = ""

        if "index" in media_type or "list" in media_type:
            return cls(_build(ImageIndex, value, "Failed to parse image index"))
        if "manifest" in media_type:
            return cls(_build(ImageManifest, value, "Failed to parse image manifest"))
        if is_object and "manifests" in value:
            return cls(_build(ImageIndex, value, "Failed to parse image index"))
        if is_object and ("layers" in value or "config" in value):
            return cls(_build(ImageManifest, value, "Failed to parse image manifest"))
        raise ValidationError("Unable to determine if content is a manifest or index")

    def is_manifest(self) -> bool:
        """True for a single-platform manifest."""
        return isinstance(self.content, ImageManifest)

    def is_index(self) -> bool:
        """True for a multi-platform index."""
        return isinstance(self.content, ImageIndex)

    def platforms(self) -> list[tuple[Platform, Descriptor]]:
        """Platforms of an index with their descriptors; empty for a manifest."""
        if not isinstance(self.content, ImageIndex):
            return []
        return [
            (desc.platform, desc)
            for desc in self.content.manifests
            if desc.platform is not None
        ]

    def find_platform(self, os: str, arch: str) -> Descriptor | None:
        """The descriptor in an index matching the given OS and architecture."""
        return next(
            (
                desc
                for platform, desc in self.platforms()
                if platform.os == os and platform.architecture == arch
            ),
            None,
        )