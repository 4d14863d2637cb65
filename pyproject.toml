[build-system]
requires = ["hatchling"]
build-backend = "hatchling.build"

[project]
name = "ocirex"
version = "0.0.1"
description = "Client library for OCI container registries: catalogs, tags, manifests and blobs, with caching and YAML configuration."
requires-python = ">=3.10"
keywords = ["oci", "registry", "container", "docker", "manifest", "distribution"]
classifiers = [
    "Development Status :: 2 - Pre-Alpha",
    "Intended Audience :: Developers",
    "Operating System :: OS Independent",
    "Programming Language :: Python :: 3",
    "Programming Language :: Python :: 3 :: Only",
    "Programming Language :: Python :: 3.10",
    "Programming Language :: Python :: 3.11",
    "Programming Language :: Python :: 3.12",
    "Programming Language :: Python :: 3.13",
    "Topic :: Software Development :: Libraries :: Python Modules",
    "Topic :: System :: Software Distribution",
]
dependencies = [
    "httpx>=0.24",
    "pyyaml>=6.0",
    "humanize>=4.0",
]

[project.optional-dependencies]
test = [
    "pytest>=7.0",
    "freezegun>=1.2",
]

[tool.hatch.build.targets.wheel]
packages = ["ocirex"]

[tool.pytest.ini_options]
testpaths = ["tests"]
addopts = "-ra"

[tool.ruff]
line-length = 100
target-version = "py310"

[tool.mypy]
python_version = "3.10"
warn_unused_ignores = true
