[build-system]
requires = ["hatchling"]
build-backend = "hatchling.build"

[project]
name = "lidi"
version = "0.1.0"
description = "Unidirectional data transfer over a network diode: wire protocol, file relay and UDP datagram forwarding"
requires-python = ">=3.10"
dependencies = []
keywords = ["diode", "unidirectional", "udp", "file-transfer", "networking"]
classifiers = [
    "Development Status :: 4 - Beta",
    "Environment :: Console",
    "Intended Audience :: System Administrators",
    "Operating System :: POSIX :: Linux",
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

[project.scripts]
diode-flood-test = "lidi.cli.flood:main"
diode-send-file = "lidi.cli.send_file:main"
diode-receive-file = "lidi.cli.receive_file:main"
diode-send-udp = "lidi.cli.send_udp:main"

[tool.hatch.build.targets.wheel]
packages = ["lidi"]

[tool.pytest.ini_options]
addopts = "-ra"

[tool.ruff]
line-length = 100
target-version = "py310"

[tool.mypy]
python_version = "3.10"
warn_unused_ignores = true
