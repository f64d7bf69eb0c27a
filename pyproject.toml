[build-system]
requires = ["setuptools>=68", "wheel"]
build-backend = "setuptools.build_meta"

[project]
name = "demiplane_db"
version = "0.1.0"
description = "Typed database fields, fluent query objects, PostgreSQL statement generation and client pools"
requires-python = ">=3.10"
dependencies = []
keywords = ["database", "postgresql", "sql", "query-builder", "connection-pool"]
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
    "Topic :: Database",
    "Topic :: Software Development :: Libraries :: Python Modules",
]

[project.optional-dependencies]
test = ["pytest"]

[tool.setuptools.packages.find]
include = ["demiplane_db*"]

[tool.pytest.ini_options]
testpaths = ["tests"]
addopts = "-ra"
