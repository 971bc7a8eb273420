"""
Error Taxonomy

Purpose: Standard error taxonomy for campaign, commitment and ledger
operations. Defines both Pydantic models for structured error communication
and Python exceptions for control flow.
"""

from typing import Any

from pydantic import BaseModel, ConfigDict, Field


# =============================================================================
# Error Codes (Machine-Readable Constants)
# =============================================================================

class ErrorCodes:
    """Stable machine-readable error codes."""

    # Lookup & State Errors
    NOT_FOUND = "NOT_FOUND"
    INVALID_STATE = "INVALID_STATE"

    # Input Errors
    VALIDATION_FAILURE = "VALIDATION_FAILURE"

    # Ledger Errors
    LEDGER_INCONSISTENCY = "LEDGER_INCONSISTENCY"
    LEDGER_CONFIG_ERROR = "LEDGER_CONFIG_ERROR"
    LEDGER_UNAVAILABLE = "LEDGER_UNAVAILABLE"

    # Merkle & Commitment Errors
    ROOT_MISMATCH = "ROOT_MISMATCH"


# =============================================================================
# Pydantic Error Models (Structured Communication)
# =============================================================================

class PackVaultError(BaseModel):
    """
    Base error model for structured error communication.

    Used for passing errors across the API boundary without exceptions.
    """

    model_config = ConfigDict(
        extra="forbid",
        frozen=False,
        validate_assignment=True,
    )

    code: str = Field(
        ...,
        description="Stable machine-readable error code",
        examples=[ErrorCodes.NOT_FOUND],
    )
    message: str = Field(
        ...,
        description="Human-readable error message",
    )
    details: dict[str, Any] = Field(
        default_factory=dict,
        description="Additional structured details about the error",
    )
    retryable: bool = Field(
        default=False,
        description="Whether the operation can be retried",
    )


# =============================================================================
# Python Exceptions (Control Flow)
# =============================================================================

class PackVaultException(Exception):
    """
    Base exception for all campaign and commitment errors.

    Carries structured error information and can be converted to a
    PackVaultError model.
    """

    def __init__(
        self,
        message: str,
        code: str = "PACKVAULT_ERROR",
        details: dict[str, Any] | None = None,
        retryable: bool = False,
    ) -> None:
        super().__init__(message)
        self.code = code
        self.message = message
        self.details = details or {}
        self.retryable = retryable

    def to_error_model(self) -> PackVaultError:
        """Convert this exception to a PackVaultError model."""
        return PackVaultError(
            code=self.code,
            message=self.message,
            details=self.details,
            retryable=self.retryable,
        )

    def __repr__(self) -> str:
        return f"{self.__class__.__name__}(code={self.code!r}, message={self.message!r})"


class NotFoundException(PackVaultException):
    """Raised when a campaign, pack or purchase does not exist."""

    def __init__(
        self,
        message: str,
        details: dict[str, Any] | None = None,
    ) -> None:
        super().__init__(
            message=message,
            code=ErrorCodes.NOT_FOUND,
            details=details,
        )


class InvalidStateException(PackVaultException):
    """Raised when the campaign status does not allow the requested operation."""

    def __init__(
        self,
        message: str,
        status: str | None = None,
        details: dict[str, Any] | None = None,
    ) -> None:
        full_details = details or {}
        if status:
            full_details["status"] = status
        super().__init__(
            message=message,
            code=ErrorCodes.INVALID_STATE,
            details=full_details,
        )


class ValidationFailureException(PackVaultException):
    """Raised when input is malformed or out of range, before any persistence."""

    def __init__(
        self,
        message: str,
        field_path: str | None = None,
        details: dict[str, Any] | None = None,
    ) -> None:
        full_details = details or {}
        if field_path:
            full_details["field_path"] = field_path
        super().__init__(
            message=message,
            code=ErrorCodes.VALIDATION_FAILURE,
            details=full_details,
        )


class LedgerInconsistencyException(PackVaultException):
    """
    Raised when on-chain facts contradict a claim.

    Covers a missing receipt, a pack index mismatch, a wrong owner, an
    already-claimed receipt and a transaction that is not final.
    """

    def __init__(
        self,
        message: str,
        details: dict[str, Any] | None = None,
    ) -> None:
        super().__init__(
            message=message,
            code=ErrorCodes.LEDGER_INCONSISTENCY,
            details=details,
        )


class CommitmentMismatchException(PackVaultException):
    """Raised when persisted packs no longer reproduce the committed root."""

    def __init__(
        self,
        message: str,
        campaign_id: str | None = None,
        details: dict[str, Any] | None = None,
    ) -> None:
        full_details = details or {}
        if campaign_id:
            full_details["campaign_id"] = campaign_id
        super().__init__(
            message=message,
            code=ErrorCodes.ROOT_MISMATCH,
            details=full_details,
        )


class LedgerConfigurationException(PackVaultException):
    """Raised when the ledger gateway lacks configuration for an operation."""

    def __init__(
        self,
        message: str,
        details: dict[str, Any] | None = None,
    ) -> None:
        super().__init__(
            message=message,
            code=ErrorCodes.LEDGER_CONFIG_ERROR,
            details=details,
        )


class LedgerUnavailableException(PackVaultException):
    """Raised when a ledger write path cannot reach the RPC node."""

    def __init__(
        self,
        message: str,
        details: dict[str, Any] | None = None,
    ) -> None:
        super().__init__(
            message=message,
            code=ErrorCodes.LEDGER_UNAVAILABLE,
            details=details,
            retryable=True,
        )
