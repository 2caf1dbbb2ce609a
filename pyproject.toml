[build-system]
requires = ["hatchling"]
build-backend = "hatchling.build"

[project]
name = "sigscope"
version = "0.1.0"
description = "Signal processing core for a serial data plotter: channel layout, expressions, averaging, channel math, XY mode, FFT, measurements, interpolation and simulated input."
requires-python = ">=3.10"
dependencies = []
keywords = [
    "oscilloscope",
    "signal processing",
    "fft",
    "welch",
    "interpolation",
    "plotting",
    "serial",
]
classifiers = [
    "Development Status :: 4 - Beta",
    "Intended Audience :: Science/Research",
    "Intended Audience :: Education",
    "Operating System :: OS Independent",
    "Programming Language :: Python :: 3",
    "Programming Language :: Python :: 3 :: Only",
    "Programming Language :: Python :: 3.10",
    "Programming Language :: Python :: 3.11",
    "Programming Language :: Python :: 3.12",
    "Programming Language :: Python :: 3.13",
    "Topic :: Scientific/Engineering :: Visualization",
]

[project.optional-dependencies]
test = ["pytest"]

[tool.hatch.build.targets.wheel]
packages = ["sigscope"]

[tool.hatch.build.targets.sdist]
include = ["sigscope", "tests"]

[tool.pytest.ini_options]
addopts = "-ra"

[tool.ruff]
line-length = 100
target-version = "py310"

[tool.mypy]
python_version = "3.10"
warn_unused_ignores = true
