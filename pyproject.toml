[build-system]
requires = ["hatchling"]
build-backend = "hatchling.build"

[project]
name = "openingexplorer"
version = "3.0.0"
description = "Data model and binary record formats for a chess opening explorer"
requires-python = ">=3.10"
dependencies = []
keywords = ["chess", "opening explorer", "statistics", "binary format"]
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
    "Topic :: Games/Entertainment :: Board Games",
    "Typing :: Typed",
]

[project.optional-dependencies]
test = [
    "pytest",
    "hypothesis",
    "pytest-asyncio",
]

[tool.hatch.build.targets.wheel]
packages = ["openingexplorer"]

[tool.pytest.ini_options]
addopts = "-ra"

[tool.ruff]
line-length = 100
target-version = "py310"

[tool.mypy]
python_version = "3.10"
strict = true
