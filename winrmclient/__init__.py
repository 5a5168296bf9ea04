"""A WinRM client for running commands and PowerShell scripts on remote Windows hosts."""

__version__ = "0.1.0"