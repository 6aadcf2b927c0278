[build-system]
requires = ["hatchling"]
build-backend = "hatchling.build"

[project]
name = "pluginsdk_tools"
version = "0.1.0"
description = "Tools for plugin SDK projects: enum and comment generation, a function wrapper generator, a g++ build driver, and installers for project templates and a Code::Blocks wizard."
requires-python = ">=3.10"
dependencies = []
keywords = ["code generation", "build", "templates", "csv", "visual studio", "code::blocks"]
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
    "Topic :: Software Development :: Code Generators",
    "Topic :: Software Development :: Build Tools",
]

[project.optional-dependencies]
test = ["pytest"]

[project.scripts]
pluginsdk-codeblocks-wizard = "pluginsdk_tools.codeblocks:main"
pluginsdk-funcs-gen = "pluginsdk_tools.funcs_gen:main"
pluginsdk-build = "pluginsdk_tools.build:main"
pluginsdk-templates = "pluginsdk_tools.wizard:main"

[tool.hatch.build.targets.wheel]
packages = ["pluginsdk_tools"]

[tool.pytest.ini_options]
addopts = "-ra"

[tool.ruff]
line-length = 100
target-version = "py310"

[tool.mypy]
python_version = "3.10"
warn_unused_ignores = true
