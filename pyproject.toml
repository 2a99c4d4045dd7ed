[build-system]
requires = ["hatchling"]
build-backend = "hatchling.build"

[project]
name = "cextend"
version = "1.0.0"
description = "Coded errors with scoped catching, a coloured logger, a tracked resource registry, reference-counted buffers and ELF symbol lookup"
requires-python = ">=3.10"
dependencies = []
keywords = ["exceptions", "error codes", "logging", "reference counting", "elf", "symbols", "backtrace"]
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
test = ["pytest"]

[tool.hatch.build.targets.wheel]
packages = ["cextend"]

[tool.pytest.ini_options]
testpaths = ["tests"]
addopts = "-ra"

[tool.ruff]
line-length = 88
target-version = "py310"
