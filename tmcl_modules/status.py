# tmcl_modules/status.py
"""
Reply status decoding.

Every TMCL reply carries a single status byte. 100 and 101 are the two
success codes; 1 to 6 are the errors a module can report. Any other byte is
not a status at all and is reported as a framing problem.
"""
from enum import IntEnum
from typing import Union

from . import constants as const
from .exceptions import UnrecognizedStatusError


class OkStatus(IntEnum):
    """Successful outcomes."""

    OK = const.STATUS_OK
    LOADED_INTO_EEPROM = const.STATUS_LOADED_INTO_EEPROM

    @property
    def description(self) -> str:
        return _DESCRIPTIONS[int(self)]


class ErrStatus(IntEnum):
    """Errors reported by the module."""

    WRONG_CHECKSUM = const.STATUS_WRONG_CHECKSUM
    INVALID_COMMAND = const.STATUS_INVALID_COMMAND
    WRONG_TYPE = const.STATUS_WRONG_TYPE
    INVALID_VALUE = const.STATUS_INVALID_VALUE
    EEPROM_LOCKED = const.STATUS_EEPROM_LOCKED
    COMMAND_NOT_AVAILABLE = const.STATUS_COMMAND_NOT_AVAILABLE

    @property
    def description(self) -> str:
        return _DESCRIPTIONS[int(self)]


Status = Union[OkStatus, ErrStatus]

_DESCRIPTIONS = {
    const.STATUS_OK: "Successfully executed, no error",
    const.STATUS_LOADED_INTO_EEPROM: "Command loaded into TMCL program EEPROM",
    const.STATUS_WRONG_CHECKSUM: "Wrong checksum",
    const.STATUS_INVALID_COMMAND: "Invalid command",
    const.STATUS_WRONG_TYPE: "Wrong type",
    const.STATUS_INVALID_VALUE: "Invalid value",
    const.STATUS_EEPROM_LOCKED: "Configuration EEPROM locked",
    const.STATUS_COMMAND_NOT_AVAILABLE: "Command not available",
}

_STATUS_TABLE = {int(member): member for member in list(OkStatus) + list(ErrStatus)}


def decode_status(status_byte: int) -> Status:
    """
    Maps a status byte to its status member.

    Raises:
        UnrecognizedStatusError: if the byte is not one of 1-6, 100 or 101.
    """
    if isinstance(status_byte, int) and not isinstance(status_byte, bool):
        member = _STATUS_TABLE.get(status_byte)
        if member is not None:
            return member
    raise UnrecognizedStatusError(
        f"Unrecognized status byte: {status_byte!r}", status_byte=status_byte
    )


def is_ok(status: Status) -> bool:
    """Returns True for OK and LOADED_INTO_EEPROM."""
    return isinstance(status, OkStatus)
