[build-system]
requires = ["hatchling"]
build-backend = "hatchling.build"

[project]
name = "mcphost"
version = "0.1.0"
description = "Terminal chat host building blocks for LLMs with MCP tools: sessions, usage tracking and message rendering"
requires-python = ">=3.10"
keywords = ["llm", "mcp", "chat", "terminal", "tokens", "usage", "markdown"]
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
    "Topic :: Scientific/Engineering :: Artificial Intelligence",
    "Topic :: Terminals",
]
dependencies = [
    "rich",
    "wcwidth",
    "prompt-toolkit",
]

[project.optional-dependencies]
test = [
    "pytest",
]

[tool.hatch.build.targets.wheel]
packages = ["mcphost"]

[tool.pytest.ini_options]
addopts = "-ra"

[tool.ruff]
line-length = 100
target-version = "py310"
