[build-system]
requires = ["hatchling"]
build-backend = "hatchling.build"

[project]
name = "barcrm"
version = "1.0.0"
description = "Member points domain model for a restaurant member management system"
requires-python = ">=3.10"
dependencies = []
keywords = ["crm", "loyalty", "points", "restaurant", "domain-model"]
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
    "Topic :: Office/Business",
]

[project.optional-dependencies]
test = ["pytest"]

[project.scripts]
barcrm = "barcrm.cli:main"

[tool.hatch.build.targets.wheel]
packages = ["barcrm"]

[tool.pytest.ini_options]
testpaths = ["tests"]
addopts = "-ra"
