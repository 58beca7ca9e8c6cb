[build-system]
requires = ["hatchling"]
build-backend = "hatchling.build"

[project]
name = "ethbridge"
version = "0.1.0"
description = "Ethereum JSON-RPC data types, bloom-based log filtering and a block-mapping database with a command-line tool"
requires-python = ">=3.10"
keywords = ["ethereum", "json-rpc", "bloom", "filter", "blockchain", "mapping"]
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
    "Topic :: Software Development :: Libraries",
]
dependencies = [
    "pycryptodome",
]

[project.optional-dependencies]
test = [
    "pytest",
]

[project.scripts]
ethbridge-db = "ethbridge.dbcmd:main"

[tool.hatch.build.targets.wheel]
packages = ["ethbridge"]

[tool.pytest.ini_options]
testpaths = ["tests"]
addopts = "-ra"
