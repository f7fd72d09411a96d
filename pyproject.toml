[build-system]
requires = ["hatchling"]
build-backend = "hatchling.build"

[project]
name = "empi"
version = "1.0.0"
description = "Building blocks for matching pursuit decomposition of multichannel signals: envelope families, signal readers, task queues and run preparation helpers"
requires-python = ">=3.10"
dependencies = [
    "numpy",
]
keywords = [
    "matching pursuit",
    "signal processing",
    "time-frequency",
    "gabor",
    "EEG",
]
classifiers = [
    "Development Status :: 4 - Beta",
    "Intended Audience :: Science/Research",
    "Operating System :: OS Independent",
    "Programming Language :: Python :: 3",
    "Programming Language :: Python :: 3 :: Only",
    "Programming Language :: Python :: 3.10",
    "Programming Language :: Python :: 3.11",
    "Programming Language :: Python :: 3.12",
    "Programming Language :: Python :: 3.13",
    "Topic :: Scientific/Engineering :: Mathematics",
    "Typing :: Typed",
]

[project.optional-dependencies]
test = [
    "pytest",
]

[tool.hatch.build.targets.wheel]
packages = ["empi"]

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
