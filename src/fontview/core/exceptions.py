"""Custom exceptions for the font viewer."""

from typing import Any


class FontViewError(Exception):
    """Base exception for all font viewer errors."""

    def __init__(self, message: str, details: Any | None = None):
        super().__init__(message)
        self.details = details


class ArgumentError(FontViewError, ValueError):
    """Exception raised for invalid command line arguments or option values."""


class ConfigurationError(FontViewError):
    """Exception raised for configuration errors."""


class FontLookupError(FontViewError, LookupError):
    """Exception raised when a query resolves to no font."""


class FontLoadError(FontViewError):
    """Exception raised when a font file cannot be read or parsed."""


class TemplateSyntaxError(FontViewError):
    """Exception raised when the specimen template does not compile."""


class RenderError(FontViewError):
    """Exception raised when a specimen cannot be laid out or rasterized."""


class CapabilityError(FontViewError):
    """Exception raised when the terminal supports no inline graphics protocol."""


# Specific exception classes for TRY003 compliance
class InvalidStyleError(ArgumentError):
    """Exception raised for an unrecognized font style or variant."""

    def __init__(self, kind: str, value: str):
        super().__init__(f"invalid font {kind} {value!r}", details={"value": value})


class InvalidColorError(ArgumentError):
    """Exception raised for an unparseable color."""

    def __init__(self, value: str):
        super().__init__(f"invalid color {value!r}", details={"value": value})


class ModeConflictError(ArgumentError):
    """Exception raised for an invalid combination of modes and arguments."""

    def __init__(self, message: str):
        super().__init__(message)


class FontNotFoundError(FontLookupError):
    """Exception raised when a name or path matches no font."""

    def __init__(self, query: str):
        super().__init__(f"unable to locate font {query!r}", details={"query": query})


class NoFontFilesError(FontLookupError):
    """Exception raised when a directory contains no recognized font files."""

    def __init__(self, directory: str):
        super().__init__(
            f"unable to locate font {directory!r}: no font files in directory",
            details={"directory": directory},
        )


class UnreadableDirectoryError(FontLookupError):
    """Exception raised when a directory query cannot be listed."""

    def __init__(self, directory: str, error: str):
        super().__init__(f"unable to open directory {directory!r}: {error}")


class FontFileError(FontLoadError):
    """Exception raised when a font file is unreadable or corrupt."""

    def __init__(self, path: str, error: str):
        super().__init__(f"unable to load font {path!r}: {error}", details={"path": path})


class NoRenderableTextError(RenderError):
    """Exception raised when no template line has glyphs in the font."""

    def __init__(self):
        super().__init__("no renderable text")


class RasterizationError(RenderError):
    """Exception raised when Pillow fails to lay out or draw a specimen."""

    def __init__(self, error: str):
        super().__init__(f"rasterization failed: {error}")


class TemplateExecutionError(RenderError):
    """Exception raised when a compiled template fails for one font."""

    def __init__(self, error: str):
        super().__init__(f"template execution failed: {error}")


class InvalidTemplateError(TemplateSyntaxError):
    """Exception raised for template source that does not parse."""

    def __init__(self, error: str, lineno: int | None = None):
        where = f" (line {lineno})" if lineno else ""
        super().__init__(f"invalid template{where}: {error}", details={"lineno": lineno})


class UnsupportedTerminalError(CapabilityError):
    """Exception raised when no graphics protocol is available."""

    def __init__(self):
        super().__init__("terminal does not support graphics")


class ConfigFileNotFoundError(ConfigurationError):
    """Exception raised when configuration file is not found."""

    def __init__(self, config_path: str):
        super().__init__(f"Configuration file not found: {config_path}")


class EmptyConfigFileError(ConfigurationError):
    """Exception raised when configuration file is empty."""

    def __init__(self, config_path: str):
        super().__init__(f"Empty configuration file: {config_path}")


class InvalidYamlError(ConfigurationError):
    """Exception raised for invalid YAML content."""

    def __init__(self, config_path: str, error: str):
        super().__init__(f"Invalid YAML in {config_path}: {error}")


class ConfigLoadError(ConfigurationError):
    """Exception raised when configuration loading fails."""

    def __init__(self, error: str):
        super().__init__(f"Failed to load configuration: {error}")
