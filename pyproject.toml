[build-system]
requires = ["hatchling"]
build-backend = "hatchling.build"

[project]
name = "roadnet"
version = "0.1.0"
description = "Road network model with candidate search and shortest-path routing for map matching"
requires-python = ">=3.10"
keywords = ["map matching", "road network", "routing", "dijkstra", "a-star", "gis"]
classifiers = [
    "Development Status :: 4 - Beta",
    "Intended Audience :: Science/Research",
    "Intended Audience :: Developers",
    "Operating System :: OS Independent",
    "Programming Language :: Python :: 3",
    "Programming Language :: Python :: 3 :: Only",
    "Programming Language :: Python :: 3.10",
    "Programming Language :: Python :: 3.11",
    "Programming Language :: Python :: 3.12",
    "Programming Language :: Python :: 3.13",
    "Topic :: Scientific/Engineering :: GIS",
]
dependencies = [
    "shapely",
]

[project.optional-dependencies]
test = [
    "pytest",
]

[tool.hatch.build.targets.wheel]
packages = ["roadnet"]

[tool.pytest.ini_options]
addopts = "-ra"
