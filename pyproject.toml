[build-system]
requires = ["hatchling"]
build-backend = "hatchling.build"

[project]
name = "eyecheck"
version = "0.1.0"
description = "Cascade detection on camera frames, with an SQLite check-in record store, record browsing, CSV export and a soft keyboard model"
requires-python = ">=3.10"
keywords = ["detection", "camera", "cascade", "attendance", "sqlite", "records", "csv"]
classifiers = [
    "Development Status :: 4 - Beta",
    "Intended Audience :: Developers",
    "Intended Audience :: End Users/Desktop",
    "Operating System :: OS Independent",
    "Programming Language :: Python :: 3",
    "Programming Language :: Python :: 3 :: Only",
    "Programming Language :: Python :: 3.10",
    "Programming Language :: Python :: 3.11",
    "Programming Language :: Python :: 3.12",
    "Programming Language :: Python :: 3.13",
    "Topic :: Database",
    "Topic :: Scientific/Engineering :: Image Recognition",
]
dependencies = [
    "numpy",
    "pillow",
]

[project.optional-dependencies]
test = [
    "pytest",
]

[project.scripts]
eyecheck = "eyecheck.app:main"

[tool.hatch.build.targets.wheel]
packages = ["eyecheck"]

[tool.hatch.build.targets.sdist]
include = ["eyecheck", "tests", "pyproject.toml"]

[tool.pytest.ini_options]
testpaths = ["tests"]
addopts = "-ra"
