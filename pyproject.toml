[build-system]
requires = ["hatchling"]
build-backend = "hatchling.build"

[project]
name = "gcontinuity"
version = "0.1.0"
description = "Wire protocol, peer registry, packet routing, pairing gate and chunked file transfer for linking a phone with a Linux desktop"
requires-python = ">=3.10"
dependencies = []
keywords = ["continuity", "pairing", "protocol", "file-transfer", "android", "linux", "asyncio"]
classifiers = [
    "Development Status :: 3 - Alpha",
    "Intended Audience :: Developers",
    "Operating System :: POSIX :: Linux",
    "Programming Language :: Python :: 3",
    "Programming Language :: Python :: 3 :: Only",
    "Programming Language :: Python :: 3.10",
    "Programming Language :: Python :: 3.11",
    "Programming Language :: Python :: 3.12",
    "Programming Language :: Python :: 3.13",
    "Framework :: AsyncIO",
    "Topic :: Communications",
]

[project.optional-dependencies]
test = ["pytest", "pytest-asyncio"]

[tool.hatch.build.targets.wheel]
packages = ["gcontinuity"]

[tool.pytest.ini_options]
testpaths = ["tests"]
addopts = "-ra"

[tool.ruff]
line-length = 100
target-version = "py310"

[tool.mypy]
python_version = "3.10"
warn_unused_ignores = true
