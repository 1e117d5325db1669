[build-system]
requires = ["hatchling"]
build-backend = "hatchling.build"

[project]
name = "hfdltools"
version = "1.4.0"
description = "HFDL receiver helpers: I/Q sample input, FIR and decimation helpers, a K=7 rate 1/2 Viterbi decoder and option parsing"
requires-python = ">=3.10"
dependencies = []
keywords = ["hfdl", "sdr", "ham-radio", "iq-samples", "dsp", "viterbi"]
classifiers = [
    "Development Status :: 4 - Beta",
    "Environment :: Console",
    "Intended Audience :: Science/Research",
    "Intended Audience :: Telecommunications Industry",
    "Operating System :: OS Independent",
    "Programming Language :: Python :: 3",
    "Programming Language :: Python :: 3 :: Only",
    "Programming Language :: Python :: 3.10",
    "Programming Language :: Python :: 3.11",
    "Programming Language :: Python :: 3.12",
    "Programming Language :: Python :: 3.13",
    "Topic :: Communications :: Ham Radio",
]

[project.optional-dependencies]
test = ["pytest", "hypothesis"]

[project.scripts]
hfdltools = "hfdltools.cli:main"

[tool.hatch.build.targets.wheel]
packages = ["hfdltools"]

[tool.pytest.ini_options]
testpaths = ["tests"]
addopts = "-ra"
