[build-system]
requires = ["hatchling"]
build-backend = "hatchling.build"

[project]
name = "fundamod"
version = "0.1.0"
description = "Modular synthesizer building blocks: envelopes, LFOs, delays, mixers, logic and noise sources processed sample by sample"
requires-python = ">=3.10"
dependencies = [
    "numpy",
]
keywords = [
    "synthesizer",
    "modular",
    "dsp",
    "audio",
    "envelope",
    "lfo",
    "noise",
    "control-voltage",
]
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
    "Topic :: Multimedia :: Sound/Audio :: Sound Synthesis",
    "Topic :: Software Development :: Libraries :: Python Modules",
]

[project.optional-dependencies]
test = [
    "pytest",
]

[tool.hatch.build.targets.wheel]
packages = ["fundamod"]

[tool.pytest.ini_options]
testpaths = ["tests"]
addopts = "-ra"
