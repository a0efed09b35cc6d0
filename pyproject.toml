[build-system]
requires = ["hatchling"]
build-backend = "hatchling.build"

[project]
name = "stellar-review"
version = "5.0.3"
description = "Decode Stellar transaction envelopes and render their fields as human-readable review text"
requires-python = ">=3.10"
dependencies = []
keywords = ["stellar", "xdr", "strkey", "transaction", "wallet"]
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
    "Topic :: Office/Business :: Financial",
    "Typing :: Typed",
]

[project.optional-dependencies]
test = ["pytest"]

[tool.hatch.build.targets.wheel]
packages = ["stellar_review"]

[tool.pytest.ini_options]
testpaths = ["tests"]
addopts = "-ra"

[tool.ruff]
line-length = 100
target-version = "py310"
