[build-system]
requires = ["hatchling"]
build-backend = "hatchling.build"

[project]
name = "cx16"
version = "0.1.0"
description = "Commander X16 emulation core: 65C02/65C816 CPU, opcode tables, cartridge images and audio mixing"
requires-python = ">=3.10"
dependencies = []
keywords = ["emulator", "6502", "65c02", "65c816", "commander-x16", "cartridge", "retro"]
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
    "Topic :: System :: Emulators",
]

[project.optional-dependencies]
test = ["pytest"]

[tool.hatch.build.targets.wheel]
packages = ["cx16"]

[tool.pytest.ini_options]
testpaths = ["tests"]
addopts = "-ra"
