[build-system]
requires = ["hatchling"]
build-backend = "hatchling.build"

[project]
name = "ftmalloc"
version = "0.1.0"
description = "A zone-based memory allocator over a simulated address space, with tiny, small and large size classes"
requires-python = ">=3.10"
dependencies = []
keywords = ["malloc", "allocator", "memory", "simulation", "zones"]
classifiers = [
    "Development Status :: 4 - Beta",
    "Intended Audience :: Developers",
    "Intended Audience :: Education",
    "Programming Language :: Python :: 3",
    "Programming Language :: Python :: 3 :: Only",
    "Programming Language :: Python :: 3.10",
    "Programming Language :: Python :: 3.11",
    "Programming Language :: Python :: 3.12",
    "Programming Language :: Python :: 3.13",
    "Operating System :: OS Independent",
    "Topic :: Software Development :: Libraries",
]

[project.optional-dependencies]
test = ["pytest"]

[project.scripts]
ftmalloc = "ftmalloc.cli:main"

[tool.hatch.build.targets.wheel]
packages = ["ftmalloc"]

[tool.pytest.ini_options]
testpaths = ["tests"]
addopts = "-ra"
