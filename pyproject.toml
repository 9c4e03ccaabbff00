[build-system]
requires = ["hatchling"]
build-backend = "hatchling.build"

[project]
name = "meshkit"
version = "0.1.0"
description = "Utilities for working with manifests, component definitions, archives, version strings and repository walkers"
requires-python = ">=3.10"
dependencies = [
    "requests",
    "pyyaml",
]
keywords = ["kubernetes", "crd", "manifests", "openapi", "utilities", "walker"]
classifiers = [
    "Development Status :: 4 - Beta",
    "Intended Audience :: Developers",
    "Operating System :: OS Independent",
    "Programming Language :: Python :: 3",
    "Programming Language :: Python :: 3 :: Only",
    "Programming Language :: Python :: 3.10",
    "Programming Language :: Python :: 3.11",
    "Programming Language :: Python :: 3.12",
    "Programming Language :: Python :: 3.13",
    "Topic :: Software Development :: Libraries",
]

[project.optional-dependencies]
test = [
    "pytest",
    "responses",
]

[tool.hatch.build.targets.wheel]
packages = ["meshkit"]

[tool.pytest.ini_options]
testpaths = ["tests"]
addopts = "-ra"

[tool.ruff]
line-length = 100
target-version = "py310"

[tool.mypy]
python_version = "3.10"
warn_unused_ignores = true
