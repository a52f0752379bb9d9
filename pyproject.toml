[build-system]
requires = ["hatchling"]
build-backend = "hatchling.build"

[project]
name = "lcukit"
version = "0.1.0"
description = "Small building blocks: ring buffers, message queues, a buddy memory pool, string helpers and an allocation tracker"
requires-python = ">=3.10"
dependencies = []
keywords = [
    "ring buffer",
    "message queue",
    "memory pool",
    "buddy allocator",
    "string builder",
    "url encoding",
    "allocation tracking",
]
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
    "Topic :: Software Development :: Libraries",
]

[project.optional-dependencies]
test = ["pytest"]

[tool.hatch.build.targets.wheel]
packages = ["lcukit"]

[tool.pytest.ini_options]
testpaths = ["tests"]
addopts = "-ra"
