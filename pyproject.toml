[build-system]
requires = ["hatchling"]
build-backend = "hatchling.build"

[project]
name = "bondvalues"
version = "0.1.0"
description = "Daily values of retail treasury bonds (EDO, ROD) read from an XLS workbook and served over a small HTTP API."
requires-python = ">=3.10"
keywords = ["bonds", "treasury", "edo", "rod", "xls", "csv", "investment"]
classifiers = [
    "Development Status :: 3 - Alpha",
    "Environment :: Web Environment",
    "Framework :: Flask",
    "Intended Audience :: Financial and Insurance Industry",
    "Operating System :: OS Independent",
    "Programming Language :: Python :: 3",
    "Programming Language :: Python :: 3 :: Only",
    "Programming Language :: Python :: 3.10",
    "Programming Language :: Python :: 3.11",
    "Programming Language :: Python :: 3.12",
    "Programming Language :: Python :: 3.13",
    "Topic :: Office/Business :: Financial :: Investment",
]
dependencies = [
    "flask",
]

[project.optional-dependencies]
test = [
    "pytest",
]

[project.scripts]
bondvalues = "bondvalues.server:main"

[tool.hatch.build.targets.wheel]
packages = ["bondvalues"]

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
