[build-system]
requires = ["hatchling"]
build-backend = "hatchling.build"

[project]
name = "camvigil"
version = "1.0.0"
description = "Playback timeline, segment indexing, gapless stitching, clip export and live-grid logic for a multi-camera recording viewer"
requires-python = ">=3.10"
dependencies = []
keywords = ["video", "surveillance", "playback", "timeline", "cctv", "camera"]
classifiers = [
    "Development Status :: 4 - Beta",
    "Intended Audience :: Developers",
    "Operating System :: OS Independent",
    "Programming Language :: Python :: 3",
    "Programming Language :: Python :: 3 :: Only",
    "Programming Language :: Python :: 3.10",
    "Programming Language :: Python :: 3.11",
    "Programming Language :: Python :: 3.12",
    "Programming Language :: Python :: 3.13",
    "Topic :: Multimedia :: Video",
]

[project.optional-dependencies]
test = ["pytest"]

[tool.hatch.build.targets.wheel]
packages = ["camvigil"]

[tool.pytest.ini_options]
addopts = "-ra"

[tool.ruff]
line-length = 100
target-version = "py310"
