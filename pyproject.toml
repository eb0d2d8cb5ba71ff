[build-system]
requires = ["hatchling"]
build-backend = "hatchling.build"

[project]
name = "imagefetch"
version = "0.1.0"
description = "Pull container images listed in a text file with sealos and save each one as a tarball."
requires-python = ">=3.10"
dependencies = []
keywords = ["sealos", "container", "images", "registry", "offline", "tarball"]
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
    "Topic :: System :: Software Distribution",
]

[project.optional-dependencies]
test = ["pytest"]

[project.scripts]
imagefetch = "imagefetch.cli:main"

[tool.hatch.build.targets.wheel]
packages = ["imagefetch"]

[tool.pytest.ini_options]
testpaths = ["tests"]
addopts = "-ra"
