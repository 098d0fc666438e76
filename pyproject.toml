[build-system]
requires = ["hatchling"]
build-backend = "hatchling.build"

[project]
name = "madios"
version = "2.0.0"
description = "RDS graph structures for ADIOS-style grammar induction: corpus paths, patterns, equivalence classes and PCFG output"
requires-python = ">=3.10"
dependencies = [
    "numpy",
]
keywords = ["adios", "grammar induction", "pcfg", "rds graph", "linguistics"]
classifiers = [
    "Development Status :: 4 - Beta",
    "Intended Audience :: Science/Research",
    "Programming Language :: Python :: 3",
    "Programming Language :: Python :: 3 :: Only",
    "Programming Language :: Python :: 3.10",
    "Programming Language :: Python :: 3.11",
    "Programming Language :: Python :: 3.12",
    "Programming Language :: Python :: 3.13",
    "Operating System :: OS Independent",
    "Topic :: Text Processing :: Linguistic",
    "Topic :: Scientific/Engineering :: Artificial Intelligence",
]

[project.optional-dependencies]
test = [
    "pytest",
]

[tool.hatch.build.targets.wheel]
packages = ["madios"]

[tool.pytest.ini_options]
testpaths = ["tests"]
addopts = "-ra"

[tool.ruff]
line-length = 100
target-version = "py310"
