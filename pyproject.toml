[build-system]
requires = ["setuptools>=61.0"]
build-backend = "setuptools.build_meta"

[project]
name = "altair8800"
version = "0.1.0"
description = "Intel 8080 CPU, memory and 88-DCDD floppy disk controller for an Altair 8800 emulator"
requires-python = ">=3.10"
dependencies = []
keywords = ["altair", "8800", "intel", "8080", "emulator", "cpu", "floppy"]
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
    "Topic :: System :: Emulators",
]

[project.optional-dependencies]
test = ["pytest"]

[tool.setuptools.packages.find]
include = ["altair8800*"]

[tool.pytest.ini_options]
testpaths = ["tests"]
addopts = "-ra"
