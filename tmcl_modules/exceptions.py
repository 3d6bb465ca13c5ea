# tmcl_modules/exceptions.py
"""
Custom exceptions for the TMCL modules library.
"""


class TMCLError(Exception):
    """Base exception class for all TMCL library errors."""
    def __init__(self, message, *args, error_code=None, module_address=None, **kwargs):
        super().__init__(message, *args)
        self.message = message
        self.error_code = error_code
        self.module_address = module_address

    def __str__(self):
        base_message = super().__str__()

        details = []
        if self.module_address is not None:
            details.append(f"Module: {self.module_address}")
        if self.error_code is not None:
            details.append(f"Error Code: {self.error_code}")

        if details:
            return f"{base_message} ({', '.join(details)})"
        return base_message


class ParameterError(TMCLError):
    """Exception for invalid parameters provided to API functions."""


class ConfigurationError(TMCLError):
    """Errors related to library or transport configuration."""


class CapabilityError(TMCLError):
    """
    Raised when an instruction is built over an axis parameter lacking the
    capability the instruction requires (e.g. GAP over a write-only
    parameter). Always a caller defect; nothing has reached the wire.
    """

    def __init__(self, message, parameter=None, required=None):
        super().__init__(message)
        self.parameter = parameter
        self.required = required


class TransportError(TMCLError):
    """Medium-specific failure while transmitting or receiving."""

    def __init__(self, message, *args, stage=None, **kwargs):
        super().__init__(message, *args, **kwargs)
        self.stage = stage


class CommunicationError(TransportError):
    """General communication errors, e.g., timeouts or short reads."""


class CANError(TransportError):
    """Exception related to CAN communication issues."""


class InterfaceUnavailableError(TMCLError):
    """The transport is held by another caller and could not be acquired."""


class FramingError(TMCLError):
    """A reply could not be interpreted: protocol or version mismatch."""


class ChecksumError(FramingError):
    """Exception for checksum mismatches in received frames."""


class TruncatedReplyError(FramingError):
    """The reply frame does not have the expected length."""


class UnrecognizedStatusError(FramingError):
    """The status byte is not part of the TMCL status table."""

    def __init__(self, message, status_byte=None, **kwargs):
        super().__init__(message, error_code=status_byte, **kwargs)
        self.status_byte = status_byte


class OperandDecodeError(FramingError):
    """The reply operand does not fit the expected native type."""


class InvalidEnumerationError(OperandDecodeError):
    """The reply operand is not part of the enumeration's value table."""


class StatusError(TMCLError):
    """
    Exception for errors reported by the module itself.

    The module rejected the command with one of the TMCL error statuses;
    ``status`` holds the :class:`~tmcl_modules.status.ErrStatus` member.
    """

    def __init__(self, message, status, module_address=None, command_number=None):
        super().__init__(message, error_code=int(status), module_address=module_address)
        self.status = status
        self.command_number = command_number

    def __str__(self):
        parts = [self.message]
        if self.module_address is not None:
            parts.append(f"Module: {self.module_address}")
        parts.append(f"Status: {self.status.name} ({int(self.status)})")
        return " - ".join(parts)
