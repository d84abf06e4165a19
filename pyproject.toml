[build-system]
requires = ["hatchling"]
build-backend = "hatchling.build"

[project]
name = "rvkrypto"
version = "0.1.0"
description = "Pure-Python model of RISC-V scalar cryptography instructions with AES, AES-GCM and PRESENT built on them"
requires-python = ">=3.10"
dependencies = []
keywords = ["risc-v", "zkn", "zks", "aes", "gcm", "ghash", "present", "sm4", "sm3", "sha-2", "cryptography"]
classifiers = [
    "Development Status :: 4 - Beta",
    "Intended Audience :: Developers",
    "Intended Audience :: Science/Research",
    "Operating System :: OS Independent",
    "Programming Language :: Python :: 3",
    "Programming Language :: Python :: 3 :: Only",
    "Programming Language :: Python :: 3.10",
    "Programming Language :: Python :: 3.11",
    "Programming Language :: Python :: 3.12",
    "Programming Language :: Python :: 3.13",
    "Topic :: Security :: Cryptography",
    "Topic :: System :: Emulators",
]

[project.optional-dependencies]
test = ["pytest"]

[tool.hatch.build.targets.wheel]
packages = ["rvkrypto"]

[tool.pytest.ini_options]
testpaths = ["tests"]
addopts = "-ra"
