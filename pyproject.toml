[build-system]
requires = ["hatchling>=1.18"]
build-backend = "hatchling.build"

[project]
name = "dxforge"
version = "0.1.3"
description = "Coordination toolkit for developer tools: event bus, pipelines, branching safety votes, cart staging, generated-code governance, a content-addressed file store and a small web file browser."
requires-python = ">=3.10"
dependencies = [
    "semver>=3.0",
]
keywords = [
    "orchestration",
    "developer-tools",
    "pipeline",
    "event-bus",
    "code-generation",
    "content-addressed",
]
classifiers = [
    "Development Status :: 3 - Alpha",
    "Environment :: Console",
    "Environment :: Web Environment",
    "Intended Audience :: Developers",
    "Operating System :: OS Independent",
    "Programming Language :: Python :: 3",
    "Programming Language :: Python :: 3 :: Only",
    "Programming Language :: Python :: 3.10",
    "Programming Language :: Python :: 3.11",
    "Programming Language :: Python :: 3.12",
    "Programming Language :: Python :: 3.13",
    "Topic :: Software Development :: Build Tools",
]

[project.optional-dependencies]
test = [
    "pytest>=7.4",
    "pytest-asyncio>=0.23",
]

[project.scripts]
dxforge-demo = "dxforge.demo:main"
dxforge-browser = "dxforge.browser:main"

[tool.hatch.build.targets.wheel]
packages = ["dxforge"]

[tool.hatch.build.targets.sdist]
include = [
    "dxforge",
    "tests",
    "pyproject.toml",
]

[tool.pytest.ini_options]
addopts = "-ra"

[tool.ruff]
line-length = 100
target-version = "py310"

[tool.ruff.lint]
select = ["E", "F", "W", "I", "B", "UP", "SIM"]

[tool.mypy]
python_version = "3.10"
warn_unused_ignores = true
warn_redundant_casts = true
check_untyped_defs = true

[tool.coverage.run]
source = ["dxforge"]
branch = true
