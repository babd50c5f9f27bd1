[build-system]
requires = ["hatchling"]
build-backend = "hatchling.build"

[project]
name = "opa_genealogy"
version = "0.1.0"
description = "SQLite-backed genealogy data layer: people, names, events, families and ancestors."
requires-python = ">=3.10"
dependencies = []
keywords = ["genealogy", "family tree", "ancestors", "sqlite"]
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
    "Topic :: Sociology :: Genealogy",
    "Typing :: Typed",
]

[project.optional-dependencies]
test = ["pytest"]

[tool.hatch.build.targets.wheel]
packages = ["opa_genealogy"]

[tool.pytest.ini_options]
addopts = "-ra"
