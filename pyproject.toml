[build-system]
requires = ["hatchling"]
build-backend = "hatchling.build"

[project]
name = "spellserve"
version = "0.1.0"
description = "HTTP service that keeps named spellchecking dictionaries and fixes words in text"
requires-python = ">=3.10"
keywords = ["spellchecker", "spelling", "dictionary", "http", "api", "flask"]
classifiers = [
    "Development Status :: 4 - Beta",
    "Environment :: Web Environment",
    "Framework :: Flask",
    "Intended Audience :: Developers",
    "Operating System :: OS Independent",
    "Programming Language :: Python :: 3",
    "Programming Language :: Python :: 3 :: Only",
    "Programming Language :: Python :: 3.10",
    "Programming Language :: Python :: 3.11",
    "Programming Language :: Python :: 3.12",
    "Programming Language :: Python :: 3.13",
    "Topic :: Internet :: WWW/HTTP :: HTTP Servers",
    "Topic :: Text Processing :: Linguistic",
]
dependencies = [
    "flask",
    "regex",
]

[project.optional-dependencies]
test = [
    "pytest",
]

[project.scripts]
spellserve = "spellserve.cli:main"

[tool.hatch.build.targets.wheel]
packages = ["spellserve"]

[tool.pytest.ini_options]
testpaths = ["tests"]
addopts = "-ra"
