"""
Shared utilities: logging setup and platform TLS helpers.
"""
