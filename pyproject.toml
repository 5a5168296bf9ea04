[build-system]
requires = ["hatchling"]
build-backend = "hatchling.build"

[project]
name = "winrmclient"
version = "0.1.0"
description = "A WinRM client for running commands and PowerShell scripts on remote Windows hosts"
requires-python = ">=3.10"
dependencies = []
keywords = ["winrm", "wsman", "windows", "remote", "powershell", "soap"]
classifiers = [
    "Development Status :: 4 - Beta",
    "Intended Audience :: System Administrators",
    "Intended Audience :: Developers",
    "Operating System :: OS Independent",
    "Programming Language :: Python :: 3",
    "Programming Language :: Python :: 3 :: Only",
    "Programming Language :: Python :: 3.10",
    "Programming Language :: Python :: 3.11",
    "Programming Language :: Python :: 3.12",
    "Programming Language :: Python :: 3.13",
    "Topic :: System :: Systems Administration",
]

[project.optional-dependencies]
test = ["pytest"]

[tool.hatch.build.targets.wheel]
packages = ["winrmclient"]

[tool.pytest.ini_options]
addopts = "-ra"
