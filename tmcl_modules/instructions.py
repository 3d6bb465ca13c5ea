# tmcl_modules/instructions.py
"""
TMCL instructions available for TMCM modules (other than TMCM-100 and
Monopack 2).

An instruction carries a fixed instruction number (a class attribute, never
instance data), a type number, a motor/bank number and a 4-byte operand.
``decode_reply`` turns the operand of a successful reply into the value the
instruction returns; most instructions return nothing.

The axis parameter instructions check the parameter's capabilities when they
are built, so an instruction the module would refuse never reaches the wire::

    GAP(0, ActualPosition)        # ok, readable
    SAP(0, ActualSpeed(100))      # CapabilityError, read-only
"""
from enum import IntEnum
from typing import Any, ClassVar, Dict, Optional, Type, Union

from . import constants as const
from .axis_parameters import AxisParameter
from .axis_parameters import Capability
from .codec import BOOLEAN
from .codec import INT32
from .codec import UINT32
from .codec import ZERO_OPERAND
from .codec import check_operand
from .exceptions import CapabilityError
from .exceptions import ParameterError

INSTRUCTIONS: Dict[int, Type["Instruction"]] = {}


def _check_byte(name: str, value: int) -> int:
    if isinstance(value, bool) or not isinstance(value, int) or not (0 <= value <= 0xFF):
        raise ParameterError(f"{name} must be an integer in range 0-255, got {value!r}.")
    return value


def _member(enum_cls, value):
    try:
        return enum_cls(value)
    except ValueError:
        raise ParameterError(f"{value!r} is not a valid {enum_cls.__name__}.") from None


class Instruction:
    """Base class of all TMCL instructions."""

    INSTRUCTION_NUMBER: ClassVar[int]
    MNEMONIC: ClassVar[str]

    def __init_subclass__(cls, **kwargs):
        super().__init_subclass__(**kwargs)
        number = cls.__dict__.get("INSTRUCTION_NUMBER")
        if number is not None:
            INSTRUCTIONS[number] = cls

    def __init__(self, type_number: int, motor_bank_number: int, operand: bytes = ZERO_OPERAND):
        if getattr(type(self), "INSTRUCTION_NUMBER", None) is None:
            raise ParameterError(f"{type(self).__name__} has no instruction number; use a concrete instruction.")
        self._type_number = _check_byte("Type number", type_number)
        self._motor_bank_number = _check_byte("Motor/bank number", motor_bank_number)
        self._operand = check_operand(operand)

    @property
    def instruction_number(self) -> int:
        return self.INSTRUCTION_NUMBER

    @property
    def type_number(self) -> int:
        return self._type_number

    @property
    def motor_bank_number(self) -> int:
        return self._motor_bank_number

    @property
    def operand(self) -> bytes:
        return self._operand

    def decode_reply(self, operand: bytes) -> Any:
        """Interprets the operand of a successful reply. Unit by default."""
        return None

    def __eq__(self, other):
        if type(other) is not type(self):
            return NotImplemented
        return (
            self._type_number == other._type_number
            and self._motor_bank_number == other._motor_bank_number
            and self._operand == other._operand
        )

    def __hash__(self):
        return hash((type(self), self._type_number, self._motor_bank_number, self._operand))

    def __repr__(self):
        return (
            f"{type(self).__name__}(type={self._type_number}, "
            f"motor_bank={self._motor_bank_number}, operand={self._operand.hex()})"
        )


def instruction_name(number: int) -> str:
    """Mnemonic for an instruction number, for logging."""
    cls = INSTRUCTIONS.get(number)
    return cls.MNEMONIC if cls else f"#{number}"


class MoveType(IntEnum):
    ABSOLUTE = const.MVP_ABSOLUTE
    RELATIVE = const.MVP_RELATIVE
    COORDINATE = const.MVP_COORDINATE


class ReferenceSearchAction(IntEnum):
    START = const.RFS_START
    STOP = const.RFS_STOP
    STATUS = const.RFS_STATUS


class CalcOperation(IntEnum):
    ADD = const.CALC_ADD
    SUB = const.CALC_SUB
    MUL = const.CALC_MUL
    DIV = const.CALC_DIV
    MOD = const.CALC_MOD
    AND = const.CALC_AND
    OR = const.CALC_OR
    XOR = const.CALC_XOR
    NOT = const.CALC_NOT
    LOAD = const.CALC_LOAD


# --- Motion ---

class ROR(Instruction):
    """ROR - Rotate Right with the given velocity."""

    INSTRUCTION_NUMBER = const.CMD_ROR
    MNEMONIC = "ROR"

    def __init__(self, motor_number: int, velocity: int):
        super().__init__(0, motor_number, INT32.encode(velocity))


class ROL(Instruction):
    """ROL - Rotate Left with the given velocity."""

    INSTRUCTION_NUMBER = const.CMD_ROL
    MNEMONIC = "ROL"

    def __init__(self, motor_number: int, velocity: int):
        super().__init__(0, motor_number, INT32.encode(velocity))


class MST(Instruction):
    """MST - Motor Stop."""

    INSTRUCTION_NUMBER = const.CMD_MST
    MNEMONIC = "MST"

    def __init__(self, motor_number: int):
        super().__init__(0, motor_number)


class MVP(Instruction):
    """
    MVP - Move to Position.

    Starts a move to an absolute position, by a relative offset, or to a
    stored coordinate. The reply is sent immediately; it does not wait for
    the move to finish.
    """

    INSTRUCTION_NUMBER = const.CMD_MVP
    MNEMONIC = "MVP"

    def __init__(self, motor_number: int, value: int, move_type: MoveType = MoveType.ABSOLUTE):
        move_type = _member(MoveType, move_type)
        if move_type is MoveType.COORDINATE:
            operand = UINT32.encode(value)
        else:
            operand = INT32.encode(value)
        super().__init__(int(move_type), motor_number, operand)

    @classmethod
    def absolute(cls, motor_number: int, position: int) -> "MVP":
        return cls(motor_number, position, MoveType.ABSOLUTE)

    @classmethod
    def relative(cls, motor_number: int, offset: int) -> "MVP":
        return cls(motor_number, offset, MoveType.RELATIVE)

    @classmethod
    def coordinate(cls, motor_number: int, coordinate_number: int) -> "MVP":
        return cls(motor_number, coordinate_number, MoveType.COORDINATE)

    @property
    def move_type(self) -> MoveType:
        return MoveType(self.type_number)


# --- Axis parameters ---

ParameterType = Type[AxisParameter]


def _parameter_class(parameter: Union[AxisParameter, ParameterType]) -> ParameterType:
    if isinstance(parameter, AxisParameter):
        return type(parameter)
    if isinstance(parameter, type) and issubclass(parameter, AxisParameter) and parameter is not AxisParameter:
        return parameter
    raise ParameterError(f"Axis parameter expected, got {parameter!r}.")


def _require(parameter_cls: ParameterType, capability: Capability, mnemonic: str) -> None:
    if capability not in parameter_cls.capabilities():
        raise CapabilityError(
            f"{mnemonic} requires a {capability.value} axis parameter; "
            f"{parameter_cls.__name__} ({parameter_cls.NUMBER}) is not {capability.value}.",
            parameter=parameter_cls,
            required=capability,
        )


class SAP(Instruction):
    """
    SAP - Set Axis Parameter

    Most parameters of a TMCM module can be adjusted individually for each
    axis. Although these parameters vary widely in their formats (1 to 24
    bits, signed or unsigned) and physical locations (TMC428, TMC453,
    controller RAM, controller EEPROM), they all can be set by this function.
    """

    INSTRUCTION_NUMBER = const.CMD_SAP
    MNEMONIC = "SAP"

    def __init__(self, motor_number: int, parameter: AxisParameter):
        if not isinstance(parameter, AxisParameter):
            raise ParameterError(f"SAP needs an axis parameter value, got {parameter!r}.")
        _require(type(parameter), Capability.WRITEABLE, self.MNEMONIC)
        self.parameter = parameter
        super().__init__(parameter.NUMBER, motor_number, parameter.operand())


class GAP(Instruction):
    """
    GAP - Get Axis Parameter

    Most parameters of a TMCM module can be adjusted individually for each
    axis; they all can be read by this function. The reply is decoded into
    the parameter's native value.
    """

    INSTRUCTION_NUMBER = const.CMD_GAP
    MNEMONIC = "GAP"

    def __init__(self, motor_number: int, parameter: Union[AxisParameter, ParameterType]):
        parameter_cls = _parameter_class(parameter)
        _require(parameter_cls, Capability.READABLE, self.MNEMONIC)
        self.parameter = parameter_cls
        super().__init__(parameter_cls.NUMBER, motor_number)

    def decode_reply(self, operand: bytes) -> Any:
        return self.parameter.CODEC.decode(operand)


class STAP(Instruction):
    """
    STAP - Store Axis Parameter

    Axis parameters are located in RAM memory, so modifications are lost at
    power down. This instruction enables permanent storing.
    """

    INSTRUCTION_NUMBER = const.CMD_STAP
    MNEMONIC = "STAP"

    def __init__(self, motor_number: int, parameter: Union[AxisParameter, ParameterType]):
        parameter_cls = _parameter_class(parameter)
        _require(parameter_cls, Capability.STORABLE, self.MNEMONIC)
        self.parameter = parameter_cls
        super().__init__(parameter_cls.NUMBER, motor_number)


class RSAP(Instruction):
    """
    RSAP - Restore Axis Parameter

    For all configuration-related axis parameters, non-volatile memory
    locations are provided. A single parameter that has been changed before
    can be reset by this instruction.
    """

    INSTRUCTION_NUMBER = const.CMD_RSAP
    MNEMONIC = "RSAP"

    def __init__(self, motor_number: int, parameter: Union[AxisParameter, ParameterType]):
        parameter_cls = _parameter_class(parameter)
        _require(parameter_cls, Capability.WRITEABLE, self.MNEMONIC)
        self.parameter = parameter_cls
        super().__init__(parameter_cls.NUMBER, motor_number)


# --- Reference search, I/O, arithmetic ---

class RFS(Instruction):
    """
    RFS - Reference Search

    START and STOP return nothing. STATUS returns True while the reference
    search is still running.
    """

    INSTRUCTION_NUMBER = const.CMD_RFS
    MNEMONIC = "RFS"

    def __init__(self, motor_number: int, action: ReferenceSearchAction = ReferenceSearchAction.START):
        super().__init__(int(_member(ReferenceSearchAction, action)), motor_number)

    @property
    def action(self) -> ReferenceSearchAction:
        return ReferenceSearchAction(self.type_number)

    def decode_reply(self, operand: bytes) -> Optional[bool]:
        if self.action is not ReferenceSearchAction.STATUS:
            return None
        return UINT32.decode(operand) != 0


class SIO(Instruction):
    """SIO - Set Output. Sets a digital output port to the given state."""

    INSTRUCTION_NUMBER = const.CMD_SIO
    MNEMONIC = "SIO"

    def __init__(self, port_number: int, state: bool, bank_number: int = const.BANK_DIGITAL_OUTPUTS):
        super().__init__(port_number, bank_number, BOOLEAN.encode(state))


class GIO(Instruction):
    """
    GIO - Get Input/Output

    Reads a digital input (bank 0), an analog input (bank 1) or the state of
    a digital output (bank 2). Analog readings are returned as integers,
    everything else as booleans.
    """

    INSTRUCTION_NUMBER = const.CMD_GIO
    MNEMONIC = "GIO"

    def __init__(self, port_number: int, bank_number: int = const.BANK_DIGITAL_INPUTS):
        super().__init__(port_number, bank_number)

    def decode_reply(self, operand: bytes) -> Union[int, bool]:
        if self.motor_bank_number == const.BANK_ANALOG_INPUTS:
            return UINT32.decode(operand)
        return BOOLEAN.decode(operand)


class CALC(Instruction):
    """CALC - Calculate. Applies an arithmetic operation to the accumulator."""

    INSTRUCTION_NUMBER = const.CMD_CALC
    MNEMONIC = "CALC"

    def __init__(self, operation: CalcOperation, value: int = 0):
        super().__init__(int(_member(CalcOperation, operation)), 0, INT32.encode(value))

    @property
    def operation(self) -> CalcOperation:
        return CalcOperation(self.type_number)
