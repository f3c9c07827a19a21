"""
Utilities Package for Ping Orchestrator

Logging, host validation and the thin wrappers around the things a
probe talks to: the terminal, the operating system and HTTP.
"""
