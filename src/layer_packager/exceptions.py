from __future__ import annotations


class PackagerError(Exception):
    """Base exception for the layer packager."""


class ConfigError(PackagerError):
    """Raised when the plugin configuration cannot be resolved."""


class ExecutionError(PackagerError):
    """Raised when a command cannot be launched at all."""


class EnvironmentUnavailableError(PackagerError):
    """Raised when the build container engine, image or container cannot be set up."""


class DiagnosticError(PackagerError):
    """Raised when command output is classified as fatal."""


class UserAbortedError(PackagerError):
    """Raised when the operator (or the unattended policy) declines to continue."""
