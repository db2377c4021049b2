# Copyright 2026 FhirModel Contributors
# SPDX-License-Identifier: Apache-2.0

"""Error taxonomy shared by the object model and its collaborators."""

# ###############
# Public Interface
# ###############


class ModelError(Exception):
    """Base class for every error raised by the object model."""


class TypeMismatchError(ModelError):
    """Raised when a value's type is outside the declared type set of a field."""


class UnsupportedOperationError(ModelError):
    """Raised when an operation is not meaningful for the targeted field."""


class AutoCreateError(UnsupportedOperationError):
    """Raised when an unset field is accessed while auto-creation is configured to fail."""


class UnknownPropertyError(ModelError):
    """Raised when an identity or name is not declared in a node's catalog."""


class UnknownCodeError(ModelError):
    """Raised when a wire code is not part of an enumeration binding.

    Attributes:
        code: The offending wire code.
        binding: Name of the binding that rejected the code.
    """

    def __init__(self, code: str, binding: str) -> None:
        super().__init__(f"Unknown {binding} code '{code}'")
        self.code = code
        self.binding = binding


class StructuralParseError(ModelError):
    """Raised when a reader meets a wire name it cannot resolve.

    Attributes:
        path: Dotted path of the node being built when the error occurred.
    """

    def __init__(self, message: str, path: str = "") -> None:
        super().__init__(f"{path}: {message}" if path else message)
        self.path = path
