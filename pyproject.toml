[build-system]
requires = ["hatchling"]
build-backend = "hatchling.build"

[project]
name = "pgtypes"
version = "10.10.6"
description = "Render Python values as PostgreSQL literals and decode PostgreSQL text-format values into Python."
requires-python = ">=3.10"
dependencies = []
keywords = ["postgresql", "sql", "hstore", "array", "bytea", "timestamp", "encoding", "decoding"]
classifiers = [
    "Development Status :: 5 - Production/Stable",
    "Intended Audience :: Developers",
    "Operating System :: OS Independent",
    "Programming Language :: Python :: 3",
    "Programming Language :: Python :: 3 :: Only",
    "Programming Language :: Python :: 3.10",
    "Programming Language :: Python :: 3.11",
    "Programming Language :: Python :: 3.12",
    "Programming Language :: Python :: 3.13",
    "Topic :: Database",
    "Typing :: Typed",
]

[project.optional-dependencies]
test = ["pytest"]

[tool.hatch.build.targets.wheel]
packages = ["pgtypes"]

[tool.pytest.ini_options]
testpaths = ["tests"]
addopts = "-ra"

[tool.ruff]
line-length = 100
target-version = "py310"
