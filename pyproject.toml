[build-system]
requires = ["hatchling"]
build-backend = "hatchling.build"

[project]
name = "kindtool"
version = "0.29.0"
description = "Helpers for running commands, aggregating errors, copying files and preparing container images for local cluster nodes"
requires-python = ">=3.10"
dependencies = []
keywords = ["kubernetes", "docker", "cluster", "errors", "subprocess", "images"]
classifiers = [
    "Development Status :: 3 - Alpha",
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
test = ["pytest"]

[project.scripts]
kindtool-version = "kindtool.version:main"

[tool.hatch.build.targets.wheel]
packages = ["kindtool"]

[tool.pytest.ini_options]
testpaths = ["tests"]
addopts = "-ra"
