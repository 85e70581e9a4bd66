[build-system]
requires = ["hatchling"]
build-backend = "hatchling.build"

[project]
name = "codeghost"
version = "0.8.0"
description = "Replay Git changes as if a ghost developer were typing every edit by hand"
requires-python = ">=3.10"
keywords = ["git", "screensaver", "animation", "diff", "terminal", "history"]
classifiers = [
    "Development Status :: 4 - Beta",
    "Environment :: Console",
    "Intended Audience :: Developers",
    "Operating System :: OS Independent",
    "Programming Language :: Python :: 3",
    "Programming Language :: Python :: 3 :: Only",
    "Programming Language :: Python :: 3.10",
    "Programming Language :: Python :: 3.11",
    "Programming Language :: Python :: 3.12",
    "Programming Language :: Python :: 3.13",
    "Topic :: Desktop Environment :: Screen Savers",
    "Topic :: Software Development :: Version Control :: Git",
]
dependencies = [
    "tomlkit",
    "wcwidth",
]

[project.optional-dependencies]
test = [
    "pytest",
]

[tool.hatch.build.targets.wheel]
packages = ["codeghost"]

[tool.pytest.ini_options]
testpaths = ["tests"]
addopts = "-ra"

[tool.ruff]
line-length = 100
target-version = "py310"

[tool.ruff.lint]
select = ["E", "F", "W", "I", "B", "UP"]

[tool.mypy]
python_version = "3.10"
warn_unused_ignores = true
warn_redundant_casts = true
