[build-system]
requires = ["hatchling"]
build-backend = "hatchling.build"

[project]
name = "bytetrack"
version = "0.1.0"
description = "Multi-object tracking that associates every detection box, using a Kalman filter and a Jonker-Volgenant assignment solver"
requires-python = ">=3.10"
dependencies = [
    "numpy",
]
keywords = ["tracking", "multi-object tracking", "bytetrack", "kalman filter", "linear assignment", "computer vision"]
classifiers = [
    "Development Status :: 4 - Beta",
    "Intended Audience :: Developers",
    "Intended Audience :: Science/Research",
    "Operating System :: OS Independent",
    "Programming Language :: Python :: 3",
    "Programming Language :: Python :: 3 :: Only",
    "Programming Language :: Python :: 3.10",
    "Programming Language :: Python :: 3.11",
    "Programming Language :: Python :: 3.12",
    "Programming Language :: Python :: 3.13",
    "Topic :: Scientific/Engineering :: Image Recognition",
]

[project.optional-dependencies]
test = [
    "pytest",
]

[tool.hatch.build.targets.wheel]
packages = ["bytetrack"]

[tool.pytest.ini_options]
testpaths = ["tests"]
addopts = "-ra"

[tool.ruff]
line-length = 100
target-version = "py310"

[tool.mypy]
python_version = "3.10"
warn_unused_ignores = true
