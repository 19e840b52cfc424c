[build-system]
requires = ["hatchling"]
build-backend = "hatchling.build"

[project]
name = "parus"
version = "1.1.0"
description = "Interpreter for Parus, a small postfix, reprogrammable stack language"
requires-python = ">=3.10"
dependencies = []
keywords = ["interpreter", "stack language", "postfix", "concatenative", "repl"]
classifiers = [
    "Development Status :: 4 - Beta",
    "Environment :: Console",
    "Intended Audience :: Developers",
    "Operating System :: OS Independent",
    "Programming Language :: Python :: 3",
    "Programming Language :: Python :: 3 :: Only",
    "Programming Language :: Python :: 3.10",
    "Programming Language :: Python :: 3.11",
    "Programming Language :: Python :: 3.12",
    "Programming Language :: Python :: 3.13",
    "Topic :: Software Development :: Interpreters",
]

[project.optional-dependencies]
test = ["pytest"]

[project.scripts]
parus = "parus.cli:main"

[tool.hatch.build.targets.wheel]
packages = ["parus"]

[tool.pytest.ini_options]
testpaths = ["tests"]
addopts = "-ra"
