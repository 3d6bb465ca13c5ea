# tmcl_modules/frames.py
"""
Frame codec: TMCL commands and replies in their wire formats.

Addressed frames (RS232, RS485, USB) are 9 bytes and end in a checksum:

    command: [MODULE_ADR, CMD_N, TYPE_N, MOTOR_N, VALUE3, VALUE2, VALUE1, VALUE0, CHECKSUM]
    reply:   [REPLY_ADR, MODULE_ADR, STATUS, CMD_N, VALUE3, VALUE2, VALUE1, VALUE0, CHECKSUM]

On CAN the address travels in the arbitration ID and the bus does its own
integrity checking, so the first address byte and the checksum are left out:

    command: [CMD_N, TYPE_N, MOTOR_N, VALUE3, VALUE2, VALUE1, VALUE0]
    reply:   [MODULE_ADR, STATUS, CMD_N, VALUE3, VALUE2, VALUE1, VALUE0]
"""
from typing import Optional, Union

import struct

from . import constants as const
from .checksum import calculate_checksum
from .checksum import verify_checksum
from .codec import check_operand
from .exceptions import ChecksumError
from .exceptions import ParameterError
from .exceptions import TruncatedReplyError
from .instructions import Instruction
from .instructions import instruction_name
from .status import Status
from .status import decode_status
from .status import is_ok


def _check_address(name: str, address: int) -> int:
    if isinstance(address, bool) or not isinstance(address, int) or not (0 <= address <= const.MAX_ADDRESS):
        raise ParameterError(f"{name} {address!r} is out of valid range 0-255.")
    return address


class Command:
    """
    A `Command` is an `Instruction` with a module address.

    It contains everything required to serialize itself into the binary
    command format.
    """

    __slots__ = ("_module_address", "_instruction")

    def __init__(self, module_address: int, instruction: Instruction):
        if not isinstance(instruction, Instruction):
            raise ParameterError(f"Instruction expected, got {instruction!r}.")
        self._module_address = _check_address("Module address", module_address)
        self._instruction = instruction

    @property
    def module_address(self) -> int:
        return self._module_address

    @property
    def instruction(self) -> Instruction:
        return self._instruction

    def serialize(self) -> bytes:
        """Serialize into the 9-byte addressed format used on RS232, RS485 etc."""
        frame = bytes([self._module_address]) + self.serialize_can()
        return frame + bytes([calculate_checksum(frame)])

    def serialize_can(self) -> bytes:
        """Serialize into the 7-byte CAN format, without address and checksum."""
        instruction = self._instruction
        return bytes(
            [
                instruction.instruction_number,
                instruction.type_number,
                instruction.motor_bank_number,
            ]
        ) + instruction.operand

    def __eq__(self, other):
        if not isinstance(other, Command):
            return NotImplemented
        return (self._module_address, self._instruction) == (other._module_address, other._instruction)

    def __hash__(self):
        return hash((self._module_address, self._instruction))

    def __repr__(self):
        return f"Command(module_address={self._module_address}, instruction={self._instruction!r})"


class Reply:
    """
    A module's answer to one command.

    ``command_number`` echoes the instruction number of the command that
    triggered the reply, which lets callers correlate replies on shared
    channels. The operand is only meaningful when the status is OK.
    """

    __slots__ = ("_reply_address", "_module_address", "_status", "_command_number", "_operand")

    def __init__(
        self,
        status: Union[Status, int],
        command_number: int,
        operand: bytes = bytes(const.OPERAND_LENGTH),
        module_address: int = const.DEFAULT_MODULE_ADDRESS,
        reply_address: Optional[int] = const.DEFAULT_HOST_ADDRESS,
    ):
        """
        ``status`` may be a status member or the raw status byte.

        Raises:
            UnrecognizedStatusError: if the status is not a TMCL status.
            ParameterError: if an address or the command number is not a byte.
            OperandDecodeError: if the operand is not 4 bytes long.
        """
        self._status = decode_status(status)
        self._command_number = _check_address("Command number", command_number)
        self._operand = check_operand(operand)
        self._module_address = _check_address("Module address", module_address)
        if reply_address is not None:
            reply_address = _check_address("Reply address", reply_address)
        self._reply_address = reply_address

    @property
    def status(self) -> Status:
        return self._status

    @property
    def command_number(self) -> int:
        return self._command_number

    @property
    def operand(self) -> bytes:
        return self._operand

    @property
    def module_address(self) -> int:
        return self._module_address

    @property
    def reply_address(self) -> Optional[int]:
        return self._reply_address

    @classmethod
    def from_bytes(cls, frame: bytes) -> "Reply":
        """
        Parses a 9-byte addressed reply.

        The checksum is verified before the status byte is looked at.

        Raises:
            TruncatedReplyError: if the frame is not 9 bytes long.
            ChecksumError: if the checksum does not match.
            UnrecognizedStatusError: if the status byte is unknown.
        """
        frame = bytes(frame)
        if len(frame) != const.REPLY_FRAME_LENGTH:
            raise TruncatedReplyError(
                f"Reply must be {const.REPLY_FRAME_LENGTH} bytes, got {len(frame)}: {frame.hex()}"
            )
        if not verify_checksum(frame):
            raise ChecksumError(
                f"Invalid checksum in reply to {instruction_name(frame[3])}: "
                f"expected {calculate_checksum(frame[:-1]):02X}, got {frame[-1]:02X}. Data: {frame.hex()}",
                module_address=frame[1],
            )
        return cls(
            status=decode_status(frame[2]),
            command_number=frame[3],
            operand=frame[4:8],
            module_address=frame[1],
            reply_address=frame[0],
        )

    @classmethod
    def from_can_bytes(cls, data: bytes, reply_address: Optional[int] = None) -> "Reply":
        """
        Parses a 7-byte CAN reply. CAN replies carry no reply address byte;
        ``reply_address`` records the host address, if known.

        Raises:
            TruncatedReplyError: if the data is not 7 bytes long.
            UnrecognizedStatusError: if the status byte is unknown.
        """
        data = bytes(data)
        if len(data) != const.CAN_REPLY_FRAME_LENGTH:
            raise TruncatedReplyError(
                f"CAN reply must be {const.CAN_REPLY_FRAME_LENGTH} bytes, got {len(data)}: {data.hex()}"
            )
        return cls(
            status=decode_status(data[1]),
            command_number=data[2],
            operand=data[3:7],
            module_address=data[0],
            reply_address=reply_address,
        )

    def serialize(self) -> bytes:
        """The 9-byte addressed form of this reply."""
        frame = bytes([self.reply_address if self.reply_address is not None else 0]) + self.serialize_can()
        return frame + bytes([calculate_checksum(frame)])

    def serialize_can(self) -> bytes:
        """The 7-byte CAN form of this reply."""
        return bytes([self.module_address, int(self.status), self.command_number]) + self.operand

    @property
    def is_ok(self) -> bool:
        return is_ok(self.status)

    @property
    def value(self) -> int:
        """The operand as a signed 32-bit integer."""
        return struct.unpack(">i", self.operand)[0]

    def __eq__(self, other):
        if not isinstance(other, Reply):
            return NotImplemented
        return all(getattr(self, name) == getattr(other, name) for name in self.__slots__)

    def __hash__(self):
        return hash(tuple(getattr(self, name) for name in self.__slots__))

    def __repr__(self):
        return (
            f"Reply(status={self.status!r}, command_number={self.command_number}, "
            f"operand={self.operand.hex()}, module_address={self.module_address}, "
            f"reply_address={self.reply_address})"
        )
