[build-system]
requires = ["hatchling"]
build-backend = "hatchling.build"

[project]
name = "gentestkit"
version = "1.0.0"
description = "Mock expectations, argument matchers and test-attribute validation for annotation-driven test suites"
requires-python = ">=3.10"
dependencies = []
keywords = ["testing", "mocking", "matchers", "expectations", "attributes", "validation"]
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
    "Topic :: Software Development :: Testing :: Mocking",
    "Topic :: Software Development :: Testing",
]

[project.optional-dependencies]
test = ["pytest"]

[tool.hatch.build.targets.wheel]
packages = ["gentestkit"]

[tool.pytest.ini_options]
testpaths = ["tests"]
addopts = "-ra"
