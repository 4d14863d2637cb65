import json

import pytest

from ocirex.errors import ValidationError
from ocirex.oci import (
    Descriptor,
    ImageIndex,
    ImageManifest,
    ManifestOrIndex,
    Platform,
)

TEST_MANIFEST = """{
    "schemaVersion": 2,
    "mediaType": "application/vnd.oci.image.manifest.v1+json",
    "config": {
        "mediaType": "application/vnd.oci.image.config.v1+json",
        "size": 7023,
        "digest": "sha256:b5b2b2c507a0944348e0303114d8d93aaaa081732b86451d9bce1f432a537bc7"
    },
    "layers": [
        {
            "mediaType": "application/vnd.oci.image.layer.v1.tar+gzip",
            "size": 32654,
            "digest": "sha256:9834876dcfb05cb167a5c24953eba58c4ac89b1adf57f28f2f9d09af107ee8f0"
        }
    ]
}"""

TEST_INDEX = """{
    "schemaVersion": 2,
    "mediaType": "application/vnd.oci.image.index.v1+json",
    "manifests": [
        {
            "mediaType": "application/vnd.oci.image.manifest.v1+json",
            "size": 7143,
            "digest": "sha256:aaaa1234567890abcdef1234567890abcdef1234567890abcdef123456789012",
            "platform": {
                "architecture": "amd64",
                "os": "linux"
            }
        },
        {
            "mediaType": "application/vnd.oci.image.manifest.v1+json",
            "size": 7682,
            "digest": "sha256:bbbb1234567890abcdef1234567890abcdef1234567890abcdef123456789012",
            "platform": {
                "architecture": "arm64",
                "os": "linux"
            }
        }
    ]
}"""

AMD64_DIGEST = "sha256:aaaa1234567890abcdef1234567890abcdef1234567890abcdef123456789012"
ARM64_DIGEST = "sha256:bbbb1234567890abcdef1234567890abcdef1234567890abcdef123456789012"


def test_image_manifest_deserialization():
    manifest = ImageManifest.from_dict(json.loads(TEST_MANIFEST))
    assert manifest.schema_version == 2
    assert (
        str(manifest.config.digest)
        == "sha256:b5b2b2c507a0944348e0303114d8d93aaaa081732b86451d9bce1f432a537bc7"
    )
    assert manifest.config.size == 7023
    assert len(manifest.layers) == 1
    assert manifest.layers[0].media_type == "application/vnd.oci.image.layer.v1.tar+gzip"


def test_image_index_deserialization():
    index = ImageIndex.from_dict(json.loads(TEST_INDEX))
    assert index.schema_version == 2
    assert [str(d.digest) for d in index.manifests] == [AMD64_DIGEST, ARM64_DIGEST]


def test_platform_from_dict_optional_fields():
    platform = Platform.from_dict(
        {"architecture": "arm", "os": "linux", "variant": "v7", "os.features": ["sse4"]}
    )
    assert platform.variant == "v7"
    assert platform.os_features == ["sse4"]
    assert platform.os_version is None


def test_platform_missing_os_fails():
    with pytest.raises(ValidationError):
        Platform.from_dict({"architecture": "amd64"})


def test_descriptor_invalid_digest_fails():
    with pytest.raises(ValidationError):
        Descriptor.from_dict(
            {"mediaType": "application/json", "size": 1, "digest": "sha256:invalid-digest"}
        )


def test_descriptor_negative_size_fails():
    with pytest.raises(ValidationError):
        Descriptor.from_dict(
            {"mediaType": "application/json", "size": -1, "digest": AMD64_DIGEST}
        )


def test_manifest_or_index_from_manifest():
    result = ManifestOrIndex.from_bytes(TEST_MANIFEST.encode())
    assert result.is_manifest()
    assert not result.is_index()
    assert result.content.schema_version == 2
    assert result.content.layers[0].size == 32654


def test_manifest_or_index_from_index():
    result = ManifestOrIndex.from_bytes(TEST_INDEX.encode())
    assert result.is_index()
    assert not result.is_manifest()
    assert len(result.content.manifests) == 2


def test_manifest_or_index_platforms():
    platforms = ManifestOrIndex.from_bytes(TEST_INDEX.encode()).platforms()
    assert len(platforms) == 2
    first, first_desc = platforms[0]
    assert first.architecture == "amd64"
    assert first.os == "linux"
    assert str(first_desc.digest) == AMD64_DIGEST
    second, _ = platforms[1]
    assert second.architecture == "arm64"
    assert second.os == "linux"


def test_manifest_or_index_find_platform():
    parsed = ManifestOrIndex.from_bytes(TEST_INDEX.encode())
    amd64 = parsed.find_platform("linux", "amd64")
    assert str(amd64.digest) == AMD64_DIGEST
    arm64 = parsed.find_platform("linux", "arm64")
    assert str(arm64.digest) == ARM64_DIGEST
    assert parsed.find_platform("windows", "amd64") is None


def test_manifest_has_no_platforms():
    parsed = ManifestOrIndex.from_bytes(TEST_MANIFEST)
    assert parsed.platforms() == []
    assert parsed.find_platform("linux", "amd64") is None


def test_index_without_media_type_inferred_from_manifests():
    data = json.loads(TEST_INDEX)
    del data["mediaType"]
    parsed = ManifestOrIndex.from_bytes(json.dumps(data).encode())
    assert parsed.is_index()
    assert parsed.content.media_type is None


def test_manifest_without_media_type_inferred_from_layers():
    data = json.loads(TEST_MANIFEST)
    del data["mediaType"]
    parsed = ManifestOrIndex.from_bytes(json.dumps(data).encode())
    assert parsed.is_manifest()


def test_docker_manifest_list_is_index():
    data = json.loads(TEST_INDEX)
    data["mediaType"] = "application/vnd.docker.distribution.manifest.list.v2+json"
    parsed = ManifestOrIndex.from_bytes(json.dumps(data).encode())
    assert parsed.is_index()


def test_unknown_structure_fails():
    with pytest.raises(ValidationError, match="Unable to determine"):
        ManifestOrIndex.from_bytes(b'{"schemaVersion": 2}')


def test_invalid_json_fails():
    with pytest.raises(ValidationError, match="Failed to parse manifest JSON"):
        ManifestOrIndex.from_bytes(b"{not json")


def test_manifest_missing_config_fails():
    data = json.loads(TEST_MANIFEST)
    del data["config"]
    with pytest.raises(ValidationError, match="Failed to parse image manifest"):
        ManifestOrIndex.from_bytes(json.dumps(data).encode())


def test_index_with_bad_descriptor_fails():
    data = json.loads(TEST_INDEX)
    data["manifests"][0]["digest"] = "not-a-digest"
    with pytest.raises(ValidationError, match="Failed to parse image index"):
        ManifestOrIndex.from_bytes(json.dumps(data).encode())