[build-system]
requires = ["hatchling"]
build-backend = "hatchling.build"

[project]
name = "kinematic_feet"
version = "0.1.0"
description = "Kinematic character controller toolkit: collide-and-slide, grounding, stepping, moving platforms and pushing bodies"
requires-python = ">=3.10"
dependencies = [
    "numpy",
]
keywords = [
    "character-controller",
    "kinematic",
    "collide-and-slide",
    "physics",
    "game",
    "simulation",
]
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
    "Topic :: Games/Entertainment :: Simulation",
    "Topic :: Software Development :: Libraries :: Python Modules",
]

[project.optional-dependencies]
test = [
    "pytest",
]

[tool.hatch.build.targets.wheel]
packages = ["kinematic_feet"]

[tool.pytest.ini_options]
testpaths = ["tests"]
addopts = "-ra"

[tool.ruff]
line-length = 100
target-version = "py310"

[tool.mypy]
python_version = "3.10"
ignore_missing_imports = true
