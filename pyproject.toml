[build-system]
requires = ["hatchling"]
build-backend = "hatchling.build"

[project]
name = "vibe_audio"
version = "0.0.1"
description = "Turn audio samples into smooth frequency bar values and tempo estimates for visualizers"
requires-python = ">=3.10"
dependencies = ["numpy"]
keywords = ["audio", "visualizer", "fft", "spectrum", "bpm", "interpolation", "mel"]
classifiers = [
    "Development Status :: 3 - Alpha",
    "Intended Audience :: Developers",
    "Operating System :: OS Independent",
    "Programming Language :: Python :: 3",
    "Programming Language :: Python :: 3 :: Only",
    "Programming Language :: Python :: 3.10",
    "Programming Language :: Python :: 3.11",
    "Programming Language :: Python :: 3.12",
    "Programming Language :: Python :: 3.13",
    "Topic :: Multimedia :: Sound/Audio :: Analysis",
]

[project.optional-dependencies]
test = ["pytest"]

[tool.hatch.build.targets.wheel]
packages = ["vibe_audio"]

[tool.pytest.ini_options]
testpaths = ["tests"]
addopts = "-ra"
