#  Copyright (c) 2025 Tom Villani, Ph.D.
"""Custom exceptions for the md2visual library.

This module defines specialized exception classes for the error conditions
that can occur while parsing Markdown and compiling it into a visual tree.

Exception Hierarchy
-------------------
- Md2VisualError (base exception)

  - ValidationError (parameter/option validation)
    - InvalidOptionsError (wrong options class)

  - ParsingError (Markdown parsing failures)

  - RenderError (visual tree compilation failures)
    - MalformedTableError (row/column count mismatch)
    - ImageUnavailableError (missing, unreadable or remote image)
    - DepthExceededError (configured quote/list depth cap violated)
    - ParserContractViolation (AST shape breaks the node contract)
    - HighlightContractError (highlight spans do not rebuild the source)

  - DependencyError (missing/incompatible packages)

"""

from typing import Any


class Md2VisualError(Exception):
    """Base exception class for all md2visual-specific errors.

    Parameters
    ----------
    message : str
        Human-readable description of the error
    original_error : Exception, optional
        The original exception that caused this error, if applicable

    Attributes
    ----------
    message : str
        The error message
    original_error : Exception or None
        The wrapped original exception, if any

    """

    def __init__(self, message: str, original_error: Exception | None = None):
        """Initialize the error with a message and optional original exception."""
        super().__init__(message)
        self.message = message
        self.original_error = original_error


class ValidationError(Md2VisualError):
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
    """Exception raised when an options object of the wrong class is provided.

    Parameters
    ----------
    component_name : str
        Name of the component that received invalid options
    expected_type : type
        The expected options class type
    received_type : type
        The actual options class type that was received
    message : str, optional
        Custom error message. If not provided, generates a helpful message

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


class ParsingError(Md2VisualError):
    """Exception raised when Markdown input cannot be turned into an AST.

    Parameters
    ----------
    message : str
        Description of the parsing failure
    parsing_stage : str, optional
        The stage of parsing where the error occurred
    original_error : Exception, optional
        The underlying exception that caused the parsing failure

    """

    def __init__(self, message: str, parsing_stage: str | None = None, original_error: Exception | None = None):
        """Initialize the parsing error."""
        super().__init__(message, original_error)
        self.parsing_stage = parsing_stage


class RenderError(Md2VisualError):
    """Exception raised when the visual tree cannot be compiled.

    Every compile failure surfaces as a single ``RenderError`` (or subclass).
    No partial tree is ever returned alongside it.

    Parameters
    ----------
    message : str
        Description of the failure
    rendering_stage : str, optional
        The stage of compilation where the error occurred
    original_error : Exception, optional
        The underlying exception that caused the failure

    """

    def __init__(self, message: str, rendering_stage: str | None = None, original_error: Exception | None = None):
        """Initialize the render error."""
        super().__init__(message, original_error)
        self.rendering_stage = rendering_stage


class MalformedTableError(RenderError):
    """Exception raised when a table row does not match the column count.

    Parameters
    ----------
    row_index : int
        Index of the offending body row (0-based, header excluded)
    expected : int
        Column count derived from the header
    actual : int
        Number of cells found in the row

    """

    def __init__(self, row_index: int, expected: int, actual: int, message: str | None = None):
        """Initialize the malformed table error."""
        if message is None:
            message = f"Table row {row_index} has {actual} cells, expected {expected}"
        super().__init__(message, rendering_stage="table")
        self.row_index = row_index
        self.expected = expected
        self.actual = actual


class ImageUnavailableError(RenderError):
    """Exception raised when an image reference cannot be resolved locally.

    Parameters
    ----------
    path : str
        The image path or URL as written in the document
    reason : str, optional
        Short description of why resolution failed
    original_error : Exception, optional
        The underlying OS or decoding error

    """

    def __init__(self, path: str, reason: str | None = None, original_error: Exception | None = None):
        """Initialize the image unavailable error."""
        message = f"Image unavailable: {path}"
        if reason:
            message += f" ({reason})"
        super().__init__(message, rendering_stage="image", original_error=original_error)
        self.path = path
        self.reason = reason


class DepthExceededError(RenderError):
    """Exception raised when a configured nesting cap is exceeded.

    Parameters
    ----------
    kind : str
        Which nesting is capped ("quote" or "list")
    depth : int
        The depth that was reached
    limit : int
        The configured maximum

    """

    def __init__(self, kind: str, depth: int, limit: int):
        """Initialize the depth exceeded error."""
        super().__init__(f"{kind} nesting depth {depth} exceeds configured maximum {limit}", rendering_stage=kind)
        self.kind = kind
        self.depth = depth
        self.limit = limit


class ParserContractViolation(RenderError):
    """Exception raised when the input AST breaks the node-type contract.

    Examples are a ``Table`` holding something other than ``TableRow``
    children, or a block node nested inside inline content.

    Parameters
    ----------
    node_kind : str
        Kind tag (or type name) of the offending node
    context : str
        Where the node was found

    """

    def __init__(self, node_kind: str, context: str):
        """Initialize the contract violation."""
        super().__init__(f"Unexpected {node_kind!r} in {context}", rendering_stage="contract")
        self.node_kind = node_kind
        self.context = context


class HighlightContractError(RenderError):
    """Exception raised when highlight spans do not reproduce the code block.

    Parameters
    ----------
    language : str or None
        Language the block was highlighted as

    """

    def __init__(self, language: str | None):
        """Initialize the highlight contract error."""
        super().__init__(
            f"Highlight spans for language {language!r} do not reconstruct the source text",
            rendering_stage="highlight",
        )
        self.language = language


class DependencyError(Md2VisualError):
    """Exception raised when required dependencies are not available.

    Parameters
    ----------
    component_name : str
        Name of the component requiring dependencies
    missing_packages : list[tuple[str, str]]
        List of (package_name, version_spec) tuples for missing packages
    version_mismatches : list[tuple[str, str, str]], optional
        List of (package_name, required_version, installed_version) tuples
    message : str, optional
        Custom error message. If not provided, generates a helpful message

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
                message_parts.append(f"{component_name} requires the following packages: {pkg_list}")

            if version_mismatches:
                mismatch_str = ", ".join(
                    f"'{name}' (requires {required}, but {installed} is installed)"
                    for name, required, installed in version_mismatches
                )
                message_parts.append(f"{component_name} has version mismatches: {mismatch_str}")

            message = "\n".join(message_parts)

            all_packages = missing_packages + [(name, req) for name, req, _ in version_mismatches]
            if all_packages:
                packages_str = " ".join(f'"{name}{spec}"' if spec else name for name, spec in all_packages)
                message += f"\nInstall with: pip install --upgrade {packages_str}"

        super().__init__(message)
        self.component_name = component_name
        self.missing_packages = missing_packages
        self.version_mismatches = version_mismatches
