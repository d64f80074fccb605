[build-system]
requires = ["hatchling"]
build-backend = "hatchling.build"

[project]
name = "wgprimitives"
version = "0.1.0"
description = "Building blocks of a WireGuard-style tunnel: replay filter, TAI64N timestamps, handshake rate limiting, cancelable I/O, configuration-socket helpers, object pools, protocol timers and transport padding."
requires-python = ">=3.10"
dependencies = []
keywords = ["wireguard", "vpn", "replay-protection", "tai64n", "rate-limiting", "uapi", "networking"]
classifiers = [
    "Development Status :: 3 - Alpha",
    "Intended Audience :: Developers",
    "Operating System :: POSIX",
    "Programming Language :: Python :: 3",
    "Programming Language :: Python :: 3 :: Only",
    "Programming Language :: Python :: 3.10",
    "Programming Language :: Python :: 3.11",
    "Programming Language :: Python :: 3.12",
    "Programming Language :: Python :: 3.13",
    "Topic :: System :: Networking",
    "Typing :: Typed",
]

[project.optional-dependencies]
test = ["pytest"]

[tool.hatch.build.targets.wheel]
packages = ["wgprimitives"]

[tool.pytest.ini_options]
testpaths = ["tests"]
addopts = "-ra"

[tool.ruff]
line-length = 100
target-version = "py310"

[tool.mypy]
python_version = "3.10"
strict = true
