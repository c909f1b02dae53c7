[build-system]
requires = ["hatchling"]
build-backend = "hatchling.build"

[project]
name = "kopkit"
version = "0.1.0"
description = "Manifest transformers, filters and reconcile stages for Knative serving and eventing installations"
requires-python = ">=3.10"
keywords = ["kubernetes", "knative", "operator", "manifest", "reconcile"]
classifiers = [
    "Development Status :: 4 - Beta",
    "Intended Audience :: System Administrators",
    "Intended Audience :: Developers",
    "Operating System :: OS Independent",
    "Programming Language :: Python :: 3",
    "Programming Language :: Python :: 3 :: Only",
    "Programming Language :: Python :: 3.10",
    "Programming Language :: Python :: 3.11",
    "Programming Language :: Python :: 3.12",
    "Programming Language :: Python :: 3.13",
    "Topic :: System :: Systems Administration",
]
dependencies = [
    "pyyaml",
]

[project.optional-dependencies]
test = [
    "pytest",
    "pyyaml",
]

[tool.hatch.build.targets.wheel]
packages = ["kopkit"]

[tool.pytest.ini_options]
testpaths = ["tests"]
addopts = "-ra"

[tool.ruff]
line-length = 100
target-version = "py310"

[tool.mypy]
python_version = "3.10"
warn_unused_ignores = true
