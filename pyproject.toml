[build-system]
requires = ["hatchling"]
build-backend = "hatchling.build"

[project]
name = "jsonnetkit"
version = "0.1.0"
description = "A Jsonnet parser producing a located syntax tree, with source mapping and value type descriptions"
requires-python = ">=3.10"
dependencies = []
keywords = ["jsonnet", "parser", "ast", "configuration", "language"]
classifiers = [
    "Development Status :: 4 - Beta",
    "Intended Audience :: Developers",
    "Programming Language :: Python :: 3",
    "Programming Language :: Python :: 3 :: Only",
    "Programming Language :: Python :: 3.10",
    "Programming Language :: Python :: 3.11",
    "Programming Language :: Python :: 3.12",
    "Programming Language :: Python :: 3.13",
    "Operating System :: OS Independent",
    "Topic :: Software Development :: Compilers",
]

[project.optional-dependencies]
test = ["pytest"]

[tool.hatch.build.targets.wheel]
packages = ["jsonnetkit"]

[tool.pytest.ini_options]
testpaths = ["tests"]
addopts = "-ra"
