[build-system]
requires = ["hatchling"]
build-backend = "hatchling.build"

[project]
name = "typerace"
version = "0.1.0"
description = "A small multiplayer typing game lobby: host or join over TCP, pick names, get ready"
requires-python = ">=3.10"
keywords = ["game", "typing", "multiplayer", "lobby", "pygame", "tcp"]
classifiers = [
    "Development Status :: 3 - Alpha",
    "Intended Audience :: End Users/Desktop",
    "Programming Language :: Python :: 3",
    "Programming Language :: Python :: 3 :: Only",
    "Programming Language :: Python :: 3.10",
    "Programming Language :: Python :: 3.11",
    "Programming Language :: Python :: 3.12",
    "Programming Language :: Python :: 3.13",
    "Operating System :: OS Independent",
    "Topic :: Games/Entertainment",
]
dependencies = [
    "pygame",
]

[project.optional-dependencies]
test = [
    "pytest",
]

[project.scripts]
typerace = "typerace.app:main"

[tool.hatch.build.targets.wheel]
packages = ["typerace"]

[tool.pytest.ini_options]
testpaths = ["tests"]
addopts = "-ra"

[tool.ruff]
line-length = 100
target-version = "py310"
