[build-system]
requires = ["hatchling"]
build-backend = "hatchling.build"

[project]
name = "plugtest"
version = "0.1.0"
description = "Plug-cycle test bench toolkit: serial relay control, SNMP v1 requests, settings and result tables"
requires-python = ">=3.10"
dependencies = [
    "pyserial",
]
keywords = ["snmp", "ber", "serial", "test bench", "plug test", "monitoring"]
classifiers = [
    "Development Status :: 4 - Beta",
    "Intended Audience :: Developers",
    "Intended Audience :: Manufacturing",
    "Operating System :: OS Independent",
    "Programming Language :: Python :: 3",
    "Programming Language :: Python :: 3 :: Only",
    "Programming Language :: Python :: 3.10",
    "Programming Language :: Python :: 3.11",
    "Programming Language :: Python :: 3.12",
    "Programming Language :: Python :: 3.13",
    "Topic :: System :: Networking :: Monitoring",
]

[project.optional-dependencies]
test = [
    "pytest",
]

[tool.hatch.build.targets.wheel]
packages = ["plugtest"]

[tool.pytest.ini_options]
addopts = "-ra"

[tool.ruff]
line-length = 100
target-version = "py310"
