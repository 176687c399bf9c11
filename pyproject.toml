[build-system]
requires = ["hatchling"]
build-backend = "hatchling.build"

[project]
name = "service_template"
version = "1.0.0"
description = "A small HTTP service skeleton with health, limit and user endpoints, structured JSON logging and request tracing ids."
requires-python = ">=3.10"
keywords = ["http", "service", "flask", "template", "structured-logging", "wsgi"]
classifiers = [
    "Development Status :: 3 - Alpha",
    "Framework :: Flask",
    "Intended Audience :: Developers",
    "Operating System :: OS Independent",
    "Programming Language :: Python :: 3",
    "Programming Language :: Python :: 3 :: Only",
    "Programming Language :: Python :: 3.10",
    "Programming Language :: Python :: 3.11",
    "Programming Language :: Python :: 3.12",
    "Programming Language :: Python :: 3.13",
    "Topic :: Internet :: WWW/HTTP :: HTTP Servers",
]
dependencies = [
    "flask>=2.3",
    "werkzeug>=2.3",
    "redis>=4.5",
]

[project.optional-dependencies]
test = [
    "pytest>=7.0",
]

[project.scripts]
service-template = "service_template.main:main"

[tool.hatch.build.targets.wheel]
packages = ["service_template"]

[tool.pytest.ini_options]
testpaths = ["tests"]
addopts = "-ra"
