"""Custom exceptions for Ruby environment activation."""

from ruby_activation.const import VERSION_MANAGERS_DOCS_URL


class ActivationError(Exception):
    """Base exception for all activation related errors."""

    def __init__(self, message: str) -> None:
        """Initialize the ActivationError."""
        super().__init__(message)


class MissingConfigurationError(ActivationError):
    """Raised when a setting required by the selected version manager is absent."""

    def __init__(self, key: str, version_manager: str | None = None) -> None:
        """Initialize the MissingConfigurationError."""
        selected = f" when '{version_manager}' is selected as the version manager" if version_manager else ""
        super().__init__(
            f"The {key} configuration must be set{selected}. "
            f"See the [README]({VERSION_MANAGERS_DOCS_URL}) for instructions."
        )
        self.key = key


class ActivationScriptError(ActivationError):
    """Raised when the activation script did not produce the expected output."""

    def __init__(self, stderr: str = "") -> None:
        """Initialize the ActivationScriptError."""
        super().__init__("Activation script did not produce expected output")
        self.stderr = stderr


class CommandFailedError(ActivationError):
    """Raised when a shell command exits with a non-zero status."""

    def __init__(self, command: str, exit_code: int, stdout: str = "", stderr: str = "") -> None:
        """Initialize the CommandFailedError."""
        super().__init__(f"Command {command} failed with exit code {exit_code}:\n{stderr or stdout}")
        self.command = command
        self.exit_code = exit_code
        self.stdout = stdout
        self.stderr = stderr


class CommandEmptyError(ActivationError):
    """Raised when the command is empty."""

    def __init__(self) -> None:
        """Initialize the CommandEmptyError."""
        super().__init__("Command cannot be empty")


class UnsupportedVersionManagerError(ActivationError):
    """Raised when no version manager is registered for an identifier."""

    def __init__(self, identifier: str) -> None:
        """Initialize the UnsupportedVersionManagerError."""
        super().__init__(f"Unsupported version manager: {identifier}")
