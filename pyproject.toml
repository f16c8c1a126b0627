[build-system]
requires = ["hatchling"]
build-backend = "hatchling.build"

[project]
name = "reportconverter"
version = "0.1.0"
description = "HTTP service that stores DOCX report templates, fills in their placeholders and converts them to PDF"
requires-python = ">=3.10"
keywords = ["report", "docx", "pdf", "template", "libreoffice", "flask"]
classifiers = [
    "Development Status :: 4 - Beta",
    "Environment :: Web Environment",
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
    "Topic :: Office/Business",
]
dependencies = [
    "flask>=2.0",
    "sqlalchemy>=2.0",
    "pyyaml",
]

[project.optional-dependencies]
test = [
    "pytest",
]

[project.scripts]
report-converter = "reportconverter.cli:main"
report-converter-migrate = "reportconverter.cli:migrate"

[tool.hatch.build.targets.wheel]
packages = ["reportconverter"]

[tool.pytest.ini_options]
addopts = "-ra"

[tool.ruff]
line-length = 100
target-version = "py310"

[tool.ruff.lint]
select = ["E", "F", "I", "B", "UP"]

[tool.mypy]
python_version = "3.10"
warn_unused_ignores = true
ignore_missing_imports = true
