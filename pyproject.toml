[build-system]
requires = ["hatchling"]
build-backend = "hatchling.build"

[project]
name = "necs"
version = "0.1.0"
description = "A small node-based entity component store for games"
requires-python = ">=3.10"
keywords = ["gamedev", "ecs", "entity-component-system", "nodes"]
classifiers = [
    "Development Status :: 3 - Alpha",
    "Intended Audience :: Developers",
    "Programming Language :: Python :: 3",
    "Programming Language :: Python :: 3 :: Only",
    "Programming Language :: Python :: 3.10",
    "Programming Language :: Python :: 3.11",
    "Programming Language :: Python :: 3.12",
    "Programming Language :: Python :: 3.13",
    "Topic :: Games/Entertainment",
    "Topic :: Software Development :: Libraries",
]
dependencies = []

[project.optional-dependencies]
test = ["pytest"]

[tool.hatch.build.targets.wheel]
packages = ["necs"]

[tool.pytest.ini_options]
testpaths = ["tests"]
addopts = "-ra"
