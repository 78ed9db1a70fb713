[build-system]
requires = ["hatchling"]
build-backend = "hatchling.build"

[project]
name = "cubenet"
version = "0.1.0"
description = "A small layered radio network stack: framing, routing, stop-and-wait transport and a message log for data cubes."
requires-python = ">=3.10"
dependencies = []
keywords = ["networking", "protocol-stack", "routing", "stop-and-wait", "radio", "simulation"]
classifiers = [
    "Development Status :: 3 - Alpha",
    "Intended Audience :: Developers",
    "Intended Audience :: Education",
    "Operating System :: OS Independent",
    "Programming Language :: Python :: 3",
    "Programming Language :: Python :: 3 :: Only",
    "Programming Language :: Python :: 3.10",
    "Programming Language :: Python :: 3.11",
    "Programming Language :: Python :: 3.12",
    "Programming Language :: Python :: 3.13",
    "Topic :: System :: Networking",
]

[project.optional-dependencies]
test = ["pytest"]

[tool.hatch.build.targets.wheel]
packages = ["cubenet"]

[tool.pytest.ini_options]
addopts = "-ra"
testpaths = ["tests"]

[tool.ruff]
line-length = 100
target-version = "py310"

[tool.mypy]
python_version = "3.10"
strict = true
