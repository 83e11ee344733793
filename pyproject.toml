[build-system]
requires = ["setuptools>=64"]
build-backend = "setuptools.build_meta"

[project]
name = "bonsaidb"
version = "1.0.0"
description = "A small page-based record store with an on-disk B+ tree index and an interactive shell"
requires-python = ">=3.10"
dependencies = []
keywords = ["database", "b+tree", "storage-engine", "pages", "index"]
classifiers = [
    "Development Status :: 3 - Alpha",
    "Environment :: Console",
    "Intended Audience :: Developers",
    "Operating System :: OS Independent",
    "Programming Language :: Python :: 3",
    "Programming Language :: Python :: 3 :: Only",
    "Programming Language :: Python :: 3.10",
    "Programming Language :: Python :: 3.11",
    "Programming Language :: Python :: 3.12",
    "Programming Language :: Python :: 3.13",
    "Topic :: Database :: Database Engines/Servers",
]

[project.optional-dependencies]
test = ["pytest"]

[project.scripts]
bonsaidb = "bonsaidb.cli:main"
bonsaidb-generate = "bonsaidb.generate:main"

[tool.setuptools.packages.find]
include = ["bonsaidb*"]

[tool.pytest.ini_options]
testpaths = ["tests"]
addopts = "-ra"
