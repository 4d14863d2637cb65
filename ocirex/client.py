"""Blocking HTTP client for the OCI Distribution v2 API."""

from __future__ import annotations

import hashlib
from typing import Any

import httpx

from .digest import Digest
from .errors import NetworkError, ValidationError
from .http import (
    MANIFEST_ACCEPT,
    ClientConfig,
    RegistryVersion,
    check_response,
    extract_next_link,
    normalize_url,
    translate_transport_error,
)


class Client:
    """Talks to one OCI registry over HTTP."""

    def __init__(
        self,
        registry_url: str,
        config: ClientConfig | None = None,
        transport: httpx.BaseTransport | None = None,
    ) -> None:
        self.registry_url = normalize_url(registry_url)
        self.config = config if config is not None else ClientConfig()
        self._http = httpx.Client(
            timeout=httpx.Timeout(float(self.config.timeout_seconds)),
            limits=httpx.Limits(
                max_keepalive_connections=self.config.max_idle_per_host
            ),
            follow_redirects=True,
            transport=transport,
        )

    def close(self) -> None:
        """Release pooled connections."""
        self._http.close()

    def __enter__(self) -> Client:
        return self

    def __exit__(self, *args: Any) -> None:
        self.close()

    def _get(self, url: str, headers: dict[str, str] | None = None) -> httpx.Response:
        try:
            return self._http.get(url, headers=headers)
        except httpx.HTTPError as exc:
            raise translate_transport_error(exc, self.registry_url) from exc

    @staticmethod
    def _json(response: httpx.Response, message: str) -> dict[str, Any]:
        try:
            value = response.json()
        except ValueError as exc:
            raise ValidationError(message, exc) from exc
        if not isinstance(value, dict):
            raise ValidationError(f"{message}: expected a JSON object")
        return value

    @staticmethod
    def _string_list(value: dict[str, Any], key: str, message: str) -> list[str]:
        items = value.get(key)
        if not isinstance(items, list) or not all(isinstance(i, str) for i in items):
            raise ValidationError(f"{message}: field '{key}' must be a list of strings")
        return list(items)

    def check_version(self) -> RegistryVersion:
        """Verify that the registry speaks the v2 API and report its version."""
        response = self._get(f"{self.registry_url}/v2/")
        api_version = response.headers.get("Docker-Distribution-API-Version")
        check_response(response)
        return RegistryVersion(api_version=api_version)

    def _paginate(self, url: str, limit: int | None):
        if limit is not None:
            url = f"{url}?n={limit}"
        while True:
            response = self._get(url)
            next_path = extract_next_link(response.headers.get("Link"))
            yield check_response(response)
            if next_path is None:
                return
            url = f"{self.registry_url}{next_path}"

    def fetch_catalog(self, limit: int | None = None) -> list[str]:
        """Return every repository name, following pagination links."""
        message = "Failed to parse catalog response"
        repositories: list[str] = []
        for response in self._paginate(f"{self.registry_url}/v2/_catalog", limit):
            body = self._json(response, message)
            repositories.extend(self._string_list(body, "repositories", message))
        return repositories

    def fetch_tags(self, repository: str, limit: int | None = None) -> list[str]:
        """Return every tag of a repository, following pagination links."""
        message = "Failed to parse tags response"
        url = f"{self.registry_url}/v2/{repository}/tags/list"
        tags: list[str] = []
        for response in self._paginate(url, limit):
            body = self._json(response, message)
            name = body.get("name")
            if not isinstance(name, str):
                raise ValidationError(f"{message}: field 'name' must be a string")
            page = self._string_list(body, "tags", message)
            if name != repository:
                raise ValidationError(
                    f"Registry returned tags for '{name}' but expected '{repository}'"
                )
            tags.extend(page)
        return tags

    def fetch_manifest(self, repository: str, reference: str) -> tuple[bytes, str]:
        """Return the raw manifest bytes and the digest the registry reports."""
        url = f"{self.registry_url}/v2/{repository}/manifests/{reference}"
        response = self._get(url, headers={"Accept": MANIFEST_ACCEPT})
        digest = response.headers.get("Docker-Content-Digest")
        if digest is None:
            raise ValidationError("Response missing Docker-Content-Digest header")
        check_response(response)
        try:
            content = response.read()
        except httpx.HTTPError as exc:
            raise NetworkError("Failed to read manifest response", exc) from exc
        return content, digest

    def fetch_blob(self, repository: str, digest: str) -> bytes:
        """Download a blob and verify it against its sha256 digest."""
        expected = Digest.parse(digest)
        url = f"{self.registry_url}/v2/{repository}/blobs/{digest}"
        response = check_response(self._get(url))
        try:
            content = response.read()
        except httpx.HTTPError as exc:
            raise NetworkError("Failed to read blob response", exc) from exc

        if expected.algorithm != "sha256":
            raise ValidationError(
                f"Unsupported digest algorithm: {expected.algorithm}. "
                "Only sha256 is currently supported"
            )
        computed = hashlib.sha256(content).hexdigest()
        if computed != expected.hex:
            raise ValidationError(
                f"Blob digest mismatch: expected {digest}, computed sha256:{computed}"
            )
        return content