"""Client library for OCI container registries: HTTP client, manifests, digests, cache and configuration."""

__version__ = "0.0.1"