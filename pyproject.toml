[build-system]
requires = ["hatchling"]
build-backend = "hatchling.build"

[project]
name = "kubectx"
version = "0.1.0"
description = "Switch between Kubernetes contexts and namespaces from the command line"
requires-python = ">=3.10"
dependencies = [
    "pyyaml",
    "requests",
]
keywords = ["kubernetes", "kubectl", "kubeconfig", "context", "namespace", "cli"]
classifiers = [
    "Development Status :: 4 - Beta",
    "Environment :: Console",
    "Intended Audience :: Developers",
    "Intended Audience :: System Administrators",
    "Operating System :: OS Independent",
    "Programming Language :: Python :: 3",
    "Programming Language :: Python :: 3 :: Only",
    "Programming Language :: Python :: 3.10",
    "Programming Language :: Python :: 3.11",
    "Programming Language :: Python :: 3.12",
    "Programming Language :: Python :: 3.13",
    "Topic :: System :: Systems Administration",
    "Topic :: Utilities",
]

[project.optional-dependencies]
test = [
    "pytest",
    "responses",
]

[project.scripts]
kubectx = "kubectx.ctx.cli:main"
kubens = "kubectx.ns.cli:main"

[tool.hatch.build.targets.wheel]
packages = ["kubectx"]

[tool.pytest.ini_options]
testpaths = ["tests"]
addopts = "-ra"
