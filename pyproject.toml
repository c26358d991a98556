[build-system]
requires = ["hatchling"]
build-backend = "hatchling.build"

[project]
name = "filetransfer"
version = "1.0.0"
description = "Building blocks for a file transfer server: logging, thread pool, configuration and encryption helpers"
requires-python = ">=3.10"
keywords = ["file transfer", "server", "configuration", "encryption", "diffie-hellman", "thread pool"]
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
    "Topic :: Internet :: File Transfer Protocol (FTP)",
    "Topic :: Security :: Cryptography",
    "Topic :: Software Development :: Libraries :: Python Modules",
]
dependencies = [
    "cryptography",
]

[project.optional-dependencies]
test = [
    "pytest",
]

[tool.hatch.build.targets.wheel]
packages = ["filetransfer"]

[tool.pytest.ini_options]
addopts = "-ra"
