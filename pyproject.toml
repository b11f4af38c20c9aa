[build-system]
requires = ["hatchling"]
build-backend = "hatchling.build"

[project]
name = "xvkit"
version = "0.1.0"
description = "A small teaching-kernel toolkit: simulated ARM two-level page tables, ELF headers, a first-fit allocator, a tiny shell parser and classic user programs"
requires-python = ">=3.10"
dependencies = []
keywords = [
    "operating-system",
    "teaching",
    "page-table",
    "mmu",
    "elf",
    "shell",
    "grep",
    "malloc",
]
classifiers = [
    "Development Status :: 3 - Alpha",
    "Intended Audience :: Education",
    "Intended Audience :: Developers",
    "Operating System :: OS Independent",
    "Programming Language :: Python :: 3",
    "Programming Language :: Python :: 3 :: Only",
    "Programming Language :: Python :: 3.10",
    "Programming Language :: Python :: 3.11",
    "Programming Language :: Python :: 3.12",
    "Programming Language :: Python :: 3.13",
    "Topic :: Education",
    "Topic :: System :: Operating System",
]

[project.optional-dependencies]
test = ["pytest"]

[project.scripts]
xvkit = "xvkit.commands:main"

[tool.hatch.build.targets.wheel]
packages = ["xvkit"]

[tool.pytest.ini_options]
addopts = "-ra"
