[build-system]
requires = ["hatchling"]
build-backend = "hatchling.build"

[project]
name = "vdrive"
version = "1.0.0"
description = "A virtual drive kept in one file, with a flat directory and contiguous block allocation"
requires-python = ">=3.10"
dependencies = []
keywords = ["virtual disk", "filesystem", "disk image", "block allocation"]
classifiers = [
    "Development Status :: 4 - Beta",
    "Environment :: Console",
    "Intended Audience :: Education",
    "Intended Audience :: Developers",
    "Operating System :: OS Independent",
    "Programming Language :: Python :: 3",
    "Programming Language :: Python :: 3 :: Only",
    "Programming Language :: Python :: 3.10",
    "Programming Language :: Python :: 3.11",
    "Programming Language :: Python :: 3.12",
    "Programming Language :: Python :: 3.13",
    "Topic :: System :: Filesystems",
]

[project.optional-dependencies]
test = ["pytest"]

[project.scripts]
vdrive = "vdrive.cli:main"

[tool.hatch.build.targets.wheel]
packages = ["vdrive"]

[tool.pytest.ini_options]
testpaths = ["tests"]
addopts = "-ra"
