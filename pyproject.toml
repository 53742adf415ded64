[build-system]
requires = ["hatchling"]
build-backend = "hatchling.build"

[project]
name = "tscache"
version = "0.1.0"
description = "Thread-safe, sharded in-memory byte cache with LRU, LFU and FIFO eviction, TTLs and optional compression"
requires-python = ">=3.10"
dependencies = [
    "zstandard",
]
keywords = ["cache", "lru", "lfu", "fifo", "ttl", "in-memory", "sharding", "compression"]
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
    "Topic :: Software Development :: Libraries :: Python Modules",
    "Typing :: Typed",
]

[project.optional-dependencies]
test = [
    "pytest",
]

[project.scripts]
tscache-demo = "tscache.demo:main"

[tool.hatch.build.targets.wheel]
packages = ["tscache"]

[tool.pytest.ini_options]
addopts = "-ra"

[tool.ruff]
line-length = 100
target-version = "py310"

[tool.mypy]
python_version = "3.10"
strict = true
