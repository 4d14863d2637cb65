# ocirex

A small library for working with OCI-compliant container registries over the
Distribution v2 API.

It provides:

- `ocirex.client.Client`: a blocking HTTP client for the version check, the
  repository catalog, tag lists, manifests and blobs. Catalog and tag listings
  follow `Link: <...>; rel="next"` pagination, and downloaded blobs are checked
  against their sha256 digest.
- `ocirex.oci`: parsing of image manifests and multi-platform image indexes
  (`ImageManifest`, `ImageIndex`, `Descriptor`, `Platform`, `ManifestOrIndex`).
- `ocirex.auth`: credentials (`AnonymousCredentials`, `BasicCredentials`,
  `BearerCredentials`) that produce an `Authorization` header value, and
  `AuthChallenge.parse` for `WWW-Authenticate` headers.
- `ocirex.digest.Digest`: parsing and validation of content digests.
- `ocirex.cache.Cache`: a two-tier cache, an in-memory LRU in front of JSON
  files on disk, with a time-to-live per kind of data.
- `ocirex.config.Config`: YAML configuration with defaults for every setting.
- `ocirex.format`: human-readable sizes and relative timestamps.

## Installation

```
pip install ocirex
```

To run the tests, install the `test` extra and run `pytest`.

## Usage

```python
from ocirex.client import Client
from ocirex.oci import ManifestOrIndex

with Client("localhost:5000") as client:
    print(client.check_version().api_version)

    for repository in client.fetch_catalog():
        print(repository)

    tags = client.fetch_tags("alpine")
    raw, digest = client.fetch_manifest("alpine", tags[0])

    image = ManifestOrIndex.from_bytes(raw)
    if image.is_index():
        for platform, descriptor in image.platforms():
            print(platform.os, platform.architecture, descriptor.digest)
    else:
        print(len(image.content.layers), "layers")
```

A registry URL without a scheme is taken as `http://`, and trailing slashes are
removed; an empty URL raises `ValidationError`. `fetch_catalog` and
`fetch_tags` take an optional `limit`, sent as the `n` page-size parameter.
`fetch_blob(repository, digest)` returns the blob's bytes, and raises
`ValidationError` when the digest is not sha256 or the content does not match.

Client behaviour can be tuned with `ClientConfig`, whose `with_*` methods
return modified copies:

```python
from ocirex.client import Client
from ocirex.http import ClientConfig

config = ClientConfig().with_timeout(60).with_max_idle_per_host(20)
client = Client("https://registry.example.com", config)
```

`Client` also accepts an `httpx` transport, for example `httpx.MockTransport`
in tests.

### Errors

Every failure is raised as a subclass of `ocirex.errors.RexError`:
`NetworkError`, `AuthenticationError` (401 and 403, with `status_code`),
`NotFoundError`, `RateLimitError` (429), `ServerError` (500, 502, 503, 504),
`ValidationError` and `ConfigError`.

### Credentials and challenges

```python
from ocirex.auth import AuthChallenge, BearerCredentials

BearerCredentials(token="token").header_value()   # "Bearer token"

challenge = AuthChallenge.parse(
    'Bearer realm="https://auth.example.com/token",service="registry"'
)
challenge.realm     # "https://auth.example.com/token"
challenge.service   # "registry"
```

### Digests

```python
from ocirex.digest import Digest

digest = Digest.parse("sha256:" + "0" * 64)
digest.algorithm   # "sha256"
str(digest)        # the original text
```

### Configuration and caching

```python
from pathlib import Path
from ocirex.config import Config
from ocirex.cache import Cache, CacheType

config = Config.load(Path("rex.yaml"))   # Config.load() gives the defaults
cache = Cache(Path("/tmp/rex-cache"), config.cache.ttl, config.cache.limits.memory_entries)
cache.set("catalog/local", ["alpine", "nginx"], CacheType.CATALOG)
print(cache.get("catalog/local"))
print(cache.prune())   # PruneStats(removed_files=..., reclaimed_space=...)
```

Cached values must be JSON-serializable. Keys are relative paths under the
cache directory; keys containing `..` or starting with `/` are rejected.

### Formatting

```python
from ocirex.format import format_size, format_size_decimal

format_size(5 * 1024)          # "5 KiB"
format_size_decimal(5 * 1000)  # "5 kB"
```

`format_timestamp(datetime)` describes a time relative to now, such as
`"a day ago"`.

## What it does not do

- There is no command-line tool; this is a library only.
- `Client` sends no credentials and does not follow authentication challenges
  or exchange tokens; `ocirex.auth` only builds header values and parses
  challenges.
- `Client` does not use the cache on its own; the caller decides what to store.
- There is no search over repositories or tags.
- Nothing is pushed to a registry; every operation is read-only.