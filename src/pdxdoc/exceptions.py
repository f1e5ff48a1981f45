#  Copyright (c) 2025 Tom Villani, Ph.D.
"""Custom exceptions for the pdxdoc library.

Parsing and layout are total: they never raise for malformed content. Only
document loading, resource decoding and the export backends surface errors,
and all of them derive from :class:`PdxError`.

Exception Hierarchy
-------------------
- PdxError (base exception)

  - ValidationError (parameter/option validation)
    - InvalidOptionsError (wrong options class for a renderer)

  - DocumentFormatError (malformed document container)

  - UnresolvedResourceError (image missing or undecodable)

  - ExportError (export backend failures)
    - ExportIOError (output target unwritable)
    - ExportEncodingError (glyph missing from the embedded fonts)
    - UnsupportedImageError (image cannot be embedded)

  - DependencyError (missing/incompatible packages)

"""

from __future__ import annotations

from typing import Any


class PdxError(Exception):
    """Base exception class for all pdxdoc-specific errors.

    Parameters
    ----------
    message : str
        Human-readable description of the error
    original_error : Exception, optional
        The original exception that caused this error, if applicable

    """

    def __init__(self, message: str, original_error: Exception | None = None):
        """Initialize the error with a message and optional original exception."""
        super().__init__(message)
        self.message = message
        self.original_error = original_error


class ValidationError(PdxError):
    """Exception raised for invalid input parameters or options.

    Parameters
    ----------
    message : str
        Description of the validation error
    parameter_name : str, optional
        Name of the invalid parameter
    parameter_value : any, optional
        The invalid value that was provided
    original_error : Exception, optional
        The original exception that caused this error

    """

    def __init__(
        self,
        message: str,
        parameter_name: str | None = None,
        parameter_value: Any = None,
        original_error: Exception | None = None,
    ):
        """Initialize the validation error with parameter details."""
        super().__init__(message, original_error=original_error)
        self.parameter_name = parameter_name
        self.parameter_value = parameter_value


class InvalidOptionsError(ValidationError):
    """Exception raised when an options object of the wrong class is supplied.

    Parameters
    ----------
    component_name : str
        Name of the component that received invalid options
    expected_type : type
        The expected options class type
    received_type : type
        The actual options class type that was received

    """

    def __init__(
        self,
        component_name: str,
        expected_type: type,
        received_type: type,
        message: str | None = None,
        original_error: Exception | None = None,
    ):
        """Initialize the invalid options error."""
        if message is None:
            message = (
                f"{component_name} expected options of type '{expected_type.__name__}' "
                f"but received '{received_type.__name__}'."
            )
        super().__init__(
            message, parameter_name="options", parameter_value=received_type, original_error=original_error
        )
        self.component_name = component_name
        self.expected_type = expected_type
        self.received_type = received_type


class DocumentFormatError(PdxError):
    """Exception raised when a document container cannot be decoded.

    Parameters
    ----------
    message : str
        Description of the problem
    file_path : str, optional
        Path of the container being loaded

    """

    def __init__(self, message: str, file_path: str | None = None, original_error: Exception | None = None):
        """Initialize the format error."""
        if file_path:
            message = f"{message} ({file_path})"
        super().__init__(message, original_error)
        self.file_path = file_path


class UnresolvedResourceError(PdxError):
    """Exception raised when an image path cannot be found or decoded.

    Parameters
    ----------
    path : str
        The resource key (image path as written in the document)
    reason : str, optional
        Short explanation of the failure

    """

    def __init__(self, path: str, reason: str | None = None, original_error: Exception | None = None):
        """Initialize the resource error."""
        message = f"Unresolved image resource: {path}"
        if reason:
            message += f" ({reason})"
        super().__init__(message, original_error)
        self.path = path
        self.reason = reason


class ExportError(PdxError):
    """Exception raised when an export backend fails.

    Parameters
    ----------
    message : str
        Description of the failure
    backend : str, optional
        Name of the backend ("html", "pdf", "png")

    """

    def __init__(self, message: str, backend: str | None = None, original_error: Exception | None = None):
        """Initialize the export error."""
        super().__init__(message, original_error)
        self.backend = backend


class ExportIOError(ExportError):
    """Exception raised when the export target cannot be written.

    Parameters
    ----------
    target : str
        Description of the output target (path or stream repr)

    """

    def __init__(
        self,
        target: str,
        backend: str | None = None,
        message: str | None = None,
        original_error: Exception | None = None,
    ):
        """Initialize the write error."""
        if message is None:
            message = f"Failed to write output: {target}"
            if original_error:
                message += f" ({original_error})"
        super().__init__(message, backend=backend, original_error=original_error)
        self.target = target


class ExportEncodingError(ExportError):
    """Exception raised when a character has no glyph in the embedded font set.

    Parameters
    ----------
    code_point : int
        The offending Unicode code point
    node_path : tuple of int
        Index path of the block node holding the run
    run_index : int
        Index of the run within the block (or list item)
    font_names : list of str, optional
        Fonts that were searched

    """

    def __init__(
        self,
        code_point: int,
        node_path: tuple[int, ...],
        run_index: int,
        backend: str | None = None,
        font_names: list[str] | None = None,
    ):
        """Initialize the encoding error."""
        char = chr(code_point)
        location = "/".join(str(i) for i in node_path) or "root"
        message = f"No glyph for U+{code_point:04X} ({char!r}) in run {run_index} of node {location}"
        if font_names:
            message += f"; searched fonts: {', '.join(font_names)}"
        super().__init__(message, backend=backend)
        self.code_point = code_point
        self.node_path = node_path
        self.run_index = run_index
        self.font_names = font_names or []


class UnsupportedImageError(ExportError):
    """Exception raised when an image resource cannot be embedded in the output.

    Parameters
    ----------
    path : str
        The resource key of the image

    """

    def __init__(self, path: str, backend: str | None = None, original_error: Exception | None = None):
        """Initialize the unsupported image error."""
        message = f"Cannot embed image: {path}"
        if original_error:
            message += f" ({original_error})"
        super().__init__(message, backend=backend, original_error=original_error)
        self.path = path


class DependencyError(PdxError):
    """Exception raised when required dependencies are not available.

    Parameters
    ----------
    component_name : str
        Name of the component requiring dependencies
    missing_packages : list[tuple[str, str]]
        List of (package_name, version_spec) tuples for missing packages
    version_mismatches : list[tuple[str, str, str]], optional
        List of (package_name, required_version, installed_version) tuples

    """

    def __init__(
        self,
        component_name: str,
        missing_packages: list[tuple[str, str]],
        version_mismatches: list[tuple[str, str, str]] | None = None,
        message: str | None = None,
        original_import_error: ImportError | None = None,
    ):
        """Initialize the dependency error with package details."""
        version_mismatches = version_mismatches or []
        self.original_import_error = original_import_error
        if message is None:
            message_parts = []
            if missing_packages:
                pkg_list = ", ".join(f"'{name}{spec}'" if spec else f"'{name}'" for name, spec in missing_packages)
                message_parts.append(f"{component_name.upper()} export requires the following packages: {pkg_list}")
            if version_mismatches:
                mismatch_str = ", ".join(
                    f"'{name}' (requires {required}, but {installed} is installed)"
                    for name, required, installed in version_mismatches
                )
                message_parts.append(f"{component_name.upper()} export has version mismatches: {mismatch_str}")
            message = "\n".join(message_parts)

            all_packages = missing_packages + [(name, req) for name, req, _ in version_mismatches]
            if all_packages:
                packages_str = " ".join(f'"{name}{spec}"' if spec else name for name, spec in all_packages)
                message += f"\nInstall with: pip install --upgrade {packages_str}"

        super().__init__(message)
        self.component_name = component_name
        self.missing_packages = missing_packages
        self.version_mismatches = version_mismatches


__all__ = [
    "PdxError",
    "ValidationError",
    "InvalidOptionsError",
    "DocumentFormatError",
    "UnresolvedResourceError",
    "ExportError",
    "ExportIOError",
    "ExportEncodingError",
    "UnsupportedImageError",
    "DependencyError",
]
