[build-system]
requires = ["hatchling"]
build-backend = "hatchling.build"

[project]
name = "maggilizer"
version = "0.1.0"
description = "Splice, pitch, reverse and delay audio effect with recycling feedback"
requires-python = ">=3.10"
dependencies = []
keywords = ["audio", "effect", "dsp", "delay", "pitch", "reverse", "splice", "ring buffer"]
classifiers = [
    "Development Status :: 3 - Alpha",
    "Intended Audience :: Developers",
    "Programming Language :: Python :: 3",
    "Programming Language :: Python :: 3 :: Only",
    "Programming Language :: Python :: 3.10",
    "Programming Language :: Python :: 3.11",
    "Programming Language :: Python :: 3.12",
    "Programming Language :: Python :: 3.13",
    "Operating System :: OS Independent",
    "Topic :: Multimedia :: Sound/Audio :: Sound Synthesis",
]

[project.optional-dependencies]
test = ["pytest"]

[tool.hatch.build.targets.wheel]
packages = ["maggilizer"]

[tool.pytest.ini_options]
addopts = "-ra"
