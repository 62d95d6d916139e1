[build-system]
requires = ["hatchling"]
build-backend = "hatchling.build"

[project]
name = "daogen"
version = "0.1.0"
description = "Generate typed model structs and query code from table metadata and annotated interface methods"
requires-python = ">=3.10"
dependencies = [
    "jinja2",
]
keywords = [
    "code generation",
    "orm",
    "dao",
    "sql",
    "model",
    "templates",
]
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
    "Topic :: Database",
    "Topic :: Software Development :: Code Generators",
    "Typing :: Typed",
]

[project.optional-dependencies]
test = [
    "pytest",
]

[tool.hatch.build.targets.wheel]
packages = ["daogen"]

[tool.hatch.build.targets.sdist]
include = [
    "daogen",
    "tests",
]

[tool.pytest.ini_options]
addopts = "-ra"

[tool.ruff]
line-length = 100
target-version = "py310"

[tool.ruff.lint]
select = ["E", "F", "W", "I", "B", "UP"]

[tool.mypy]
python_version = "3.10"
warn_unused_ignores = true
warn_redundant_casts = true
