[build-system]
requires = ["hatchling"]
build-backend = "hatchling.build"

[project]
name = "clusternet"
version = "0.1.0"
description = "Building blocks for managing applications across many Kubernetes clusters: feeds, overrides, shadow templates, selectors and kubeconfig helpers."
requires-python = ">=3.10"
dependencies = [
    "pyyaml",
]
keywords = [
    "kubernetes",
    "multi-cluster",
    "helm",
    "json-patch",
    "merge-patch",
    "kubeconfig",
    "label-selector",
]
classifiers = [
    "Development Status :: 3 - Alpha",
    "Intended Audience :: Developers",
    "Intended Audience :: System Administrators",
    "Operating System :: OS Independent",
    "Programming Language :: Python :: 3",
    "Programming Language :: Python :: 3 :: Only",
    "Programming Language :: Python :: 3.10",
    "Programming Language :: Python :: 3.11",
    "Programming Language :: Python :: 3.12",
    "Programming Language :: Python :: 3.13",
    "Topic :: System :: Distributed Computing",
    "Typing :: Typed",
]

[project.optional-dependencies]
test = [
    "pytest",
]

[tool.hatch.build.targets.wheel]
packages = ["clusternet"]

[tool.hatch.build.targets.sdist]
include = [
    "clusternet",
    "tests",
]

[tool.pytest.ini_options]
addopts = "-ra"

[tool.ruff]
line-length = 100
target-version = "py310"

[tool.mypy]
python_version = "3.10"
warn_unused_ignores = true
