[build-system]
requires = ["hatchling"]
build-backend = "hatchling.build"

[project]
name = "gnbnet"
version = "0.1.0"
description = "Networking building blocks: murmur-hashed maps, address lists, bounded containers, readiness event handlers and a multi-destination logger."
requires-python = ">=3.10"
dependencies = []
keywords = [
    "networking",
    "event-loop",
    "select",
    "selectors",
    "murmurhash",
    "hash-map",
    "logging",
    "udp",
]
classifiers = [
    "Development Status :: 3 - Alpha",
    "Intended Audience :: Developers",
    "Intended Audience :: System Administrators",
    "Operating System :: POSIX",
    "Programming Language :: Python :: 3",
    "Programming Language :: Python :: 3 :: Only",
    "Programming Language :: Python :: 3.10",
    "Programming Language :: Python :: 3.11",
    "Programming Language :: Python :: 3.12",
    "Programming Language :: Python :: 3.13",
    "Topic :: System :: Networking",
    "Topic :: Software Development :: Libraries :: Python Modules",
]

[project.optional-dependencies]
test = ["pytest"]

[tool.hatch.build.targets.wheel]
packages = ["gnbnet"]

[tool.hatch.build.targets.sdist]
include = ["gnbnet", "tests"]

[tool.pytest.ini_options]
addopts = "-ra"

[tool.ruff]
line-length = 100
target-version = "py310"

[tool.ruff.lint]
select = ["E", "F", "W", "I", "B", "UP"]

[tool.mypy]
python_version = "3.10"
warn_unused_ignores = true
warn_redundant_casts = true
