[build-system]
requires = ["hatchling"]
build-backend = "hatchling.build"

[project]
name = "nesemu"
version = "0.1.0"
description = "Core pieces of a NES emulator: 6502 CPU, memory regions, joypads and iNES cartridge loading"
requires-python = ">=3.10"
dependencies = []
keywords = ["nes", "emulator", "6502", "ines", "cpu", "disassembler"]
classifiers = [
    "Development Status :: 3 - Alpha",
    "Intended Audience :: Developers",
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

[tool.hatch.build.targets.wheel]
packages = ["nesemu"]

[tool.pytest.ini_options]
addopts = "-ra"
