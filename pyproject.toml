[build-system]
requires = ["hatchling"]
build-backend = "hatchling.build"

[project]
name = "rapidlog"
version = "1.4.0"
description = "Fast logging with named loggers, pattern formatting, and file, rotating, colour and asynchronous sinks."
requires-python = ">=3.10"
dependencies = []
keywords = [
    "logging",
    "logger",
    "sinks",
    "async",
    "rotating-file",
    "pattern-formatter",
]
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
    "Topic :: System :: Logging",
    "Typing :: Typed",
]

[project.optional-dependencies]
test = ["pytest"]

[tool.hatch.build.targets.wheel]
packages = ["rapidlog"]

[tool.hatch.build.targets.sdist]
include = ["rapidlog", "tests"]

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
