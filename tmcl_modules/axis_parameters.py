# tmcl_modules/axis_parameters.py
"""
Axis parameters usable with TMCM modules (other than TMCM-100 and Monopack 2).

Each parameter is a class bound to a fixed parameter number, a codec for its
native value, and the capabilities the hardware grants it:

- readable parameters can be queried with GAP,
- writeable parameters can be changed with SAP, and stored to or restored
  from EEPROM with STAP / RSAP (every writeable parameter is storable).

The catalog is fixed by the module firmware. Entries are declared with class
keywords and validated when this module is imported::

    class ActualPosition(AxisParameter, number=1, codec=INT32,
                         readable=True, writeable=True):
        ...

Mnemonics:
    - AP - ActualPosition (1)
    - AS - ActualSpeed (3)
    - MPS - MaximumPositioningSpeed (4)
    - AMC - AbsoluteMaxCurrent (6)
    - SBC - StandbyCurrent (7)
    - RLSD - RightLimitSwitchDisable (12)
    - LLSD - LeftLimitSwitchDisable (13)
    - MSR - MicrostepResolution (140)
"""
from dataclasses import dataclass
from enum import Enum
from enum import IntEnum
from typing import Any, ClassVar, Dict, FrozenSet, Type, Union

import struct

from . import constants as const
from .codec import BOOLEAN
from .codec import INT32
from .codec import UINT8
from .codec import UINT16
from .codec import UINT32
from .codec import Codec
from .codec import EnumCodec
from .codec import IntegerCodec
from .codec import check_operand
from .exceptions import InvalidEnumerationError
from .exceptions import ParameterError


class Capability(Enum):
    READABLE = "readable"
    WRITEABLE = "writeable"
    STORABLE = "storable"


AXIS_PARAMETERS: Dict[int, Type["AxisParameter"]] = {}


class AxisParameter:
    """
    Base class of all catalog entries.

    An instance wraps a validated native value, e.g. ``TargetPosition(1000)``.
    """

    NUMBER: ClassVar[int]
    CODEC: ClassVar[Codec]
    CAPABILITIES: ClassVar[FrozenSet[Capability]] = frozenset()

    def __init_subclass__(
        cls,
        number: int = None,
        codec: Codec = None,
        readable: bool = False,
        writeable: bool = False,
        **kwargs,
    ):
        super().__init_subclass__(**kwargs)
        if number is None or codec is None:
            raise TypeError(f"Axis parameter {cls.__name__} must declare a number and a codec.")
        if not (0 <= number <= 0xFF):
            raise TypeError(f"Axis parameter {cls.__name__}: number {number} is out of range 0-255.")
        if number in AXIS_PARAMETERS:
            raise TypeError(
                f"Axis parameter {cls.__name__}: number {number} already used by "
                f"{AXIS_PARAMETERS[number].__name__}."
            )
        capabilities = set()
        if readable:
            capabilities.add(Capability.READABLE)
        if writeable:
            capabilities.update((Capability.WRITEABLE, Capability.STORABLE))
        cls.NUMBER = number
        cls.CODEC = codec
        cls.CAPABILITIES = frozenset(capabilities)
        AXIS_PARAMETERS[number] = cls

    def __init__(self, value: Any):
        self._value = self.CODEC.validate(value)

    @property
    def value(self) -> Any:
        return self._value

    def operand(self) -> bytes:
        """The value encoded as the 4-byte instruction operand."""
        return self.CODEC.encode(self._value)

    @classmethod
    def from_operand(cls, operand: bytes) -> "AxisParameter":
        return cls(cls.CODEC.decode(operand))

    @classmethod
    def capabilities(cls) -> FrozenSet[Capability]:
        return cls.CAPABILITIES

    @classmethod
    def is_readable(cls) -> bool:
        return Capability.READABLE in cls.CAPABILITIES

    @classmethod
    def is_writeable(cls) -> bool:
        return Capability.WRITEABLE in cls.CAPABILITIES

    def __eq__(self, other):
        if type(other) is not type(self):
            return NotImplemented
        return self._value == other._value

    def __hash__(self):
        return hash((type(self), self._value))

    def __repr__(self):
        return f"{type(self).__name__}({self._value!r})"


def axis_parameter(number: int) -> Type[AxisParameter]:
    """Returns the catalog entry for a parameter number."""
    try:
        return AXIS_PARAMETERS[number]
    except KeyError:
        raise ParameterError(f"Unknown axis parameter number: {number}") from None


# --- Value types ---

class Microsteps(IntEnum):
    """
    Microstep resolution setting (axis parameter 140).

    Note that modifying this parameter will affect the rotation speed in the
    same relation. The fullstep and halfstep settings just step through the
    microstep table in steps of 64 respectively 32; they are not optimized for
    use without an adapted microstepping table.
    """

    FULL = 0
    HALF = 1
    MICRO4 = 2
    MICRO8 = 3
    MICRO16 = 4
    MICRO32 = 5
    MICRO64 = 6
    MICRO128 = 7
    MICRO256 = 8

    @property
    def microsteps(self) -> int:
        """Microsteps per full step."""
        return 1 << int(self)

    @classmethod
    def from_microsteps(cls, count: int) -> "Microsteps":
        for member in cls:
            if member.microsteps == count:
                return member
        raise ParameterError(f"Unsupported microstep count: {count}")


class SearchMode(IntEnum):
    """Stop switch reference searches."""

    LEFT_SWITCH = 1  # left stop switch only
    RIGHT_THEN_LEFT_SWITCH = 2  # right stop switch, then left stop switch
    RIGHT_THEN_LEFT_FROM_BOTH_SIDES = 3  # right, then left stop switch from both sides
    LEFT_FROM_BOTH_SIDES = 4  # left stop switch from both sides


class HomeSearchMode(IntEnum):
    """Home switch reference searches."""

    NEGATIVE_THEN_LEFT = 5  # negative direction, reverse at left stop switch
    POSITIVE_THEN_RIGHT = 6  # positive direction, reverse at right stop switch
    POSITIVE = 7  # positive direction, ignore end switches
    NEGATIVE = 8  # negative direction, ignore end switches


@dataclass(frozen=True)
class LimitSwitchSearch:
    """Reference search on the stop switches (modes 1-4)."""
    search_mode: SearchMode
    swap_left_right: bool = False  # search the right instead of the left switch


@dataclass(frozen=True)
class HomeSearch:
    """Reference search on the home switch (modes 5-8)."""
    search_mode: HomeSearchMode
    invert_home_switch: bool = False


ReferenceSearchModeValue = Union[LimitSwitchSearch, HomeSearch]

_LIMIT_SWITCH_MODES = frozenset(int(mode) for mode in SearchMode)
_HOME_SWITCH_MODES = frozenset(int(mode) for mode in HomeSearchMode)


class ReferenceSearchModeCodec(Codec):
    """
    Base mode in the low bits, additive modifier flags in bits 6 and 7.

    Adding 64 searches the right instead of the left switch (modes 1-4);
    adding 128 inverts the home switch (modes 5-8).
    """

    name = "reference_search_mode"

    def validate(self, value: Any) -> ReferenceSearchModeValue:
        if isinstance(value, LimitSwitchSearch) and isinstance(value.search_mode, SearchMode):
            return value
        if isinstance(value, HomeSearch) and isinstance(value.search_mode, HomeSearchMode):
            return value
        raise ParameterError(f"Reference search mode expected, got {value!r}.")

    def to_byte(self, value: ReferenceSearchModeValue) -> int:
        value = self.validate(value)
        if isinstance(value, LimitSwitchSearch):
            flag = const.RFS_MODE_SWAP_LEFT_RIGHT if value.swap_left_right else 0
        else:
            flag = const.RFS_MODE_INVERT_HOME_SWITCH if value.invert_home_switch else 0
        return int(value.search_mode) + flag

    def encode(self, value: ReferenceSearchModeValue) -> bytes:
        return struct.pack(">I", self.to_byte(value))

    def decode(self, operand: bytes) -> ReferenceSearchModeValue:
        value = struct.unpack(">I", check_operand(operand))[0]
        if value > 0xFF:
            raise InvalidEnumerationError(f"Reference search mode {value} is out of range.")
        base = value & const.RFS_MODE_BASE_MASK
        flags = value & ~const.RFS_MODE_BASE_MASK
        if base in _LIMIT_SWITCH_MODES:
            if flags & ~const.RFS_MODE_SWAP_LEFT_RIGHT:
                raise InvalidEnumerationError(
                    f"Reference search mode {value}: invalid modifier for limit switch search."
                )
            return LimitSwitchSearch(SearchMode(base), bool(flags))
        if base in _HOME_SWITCH_MODES:
            if flags & ~const.RFS_MODE_INVERT_HOME_SWITCH:
                raise InvalidEnumerationError(
                    f"Reference search mode {value}: invalid modifier for home switch search."
                )
            return HomeSearch(HomeSearchMode(base), bool(flags))
        raise InvalidEnumerationError(f"Reference search mode {value} is not a valid mode.")


MICROSTEPS = EnumCodec(Microsteps)
REFERENCE_SEARCH_MODE = ReferenceSearchModeCodec()
DIVISOR = IntegerCodec(8, signed=False, maximum=const.MAX_DIVISOR)


# --- Catalog ---

class TargetPosition(AxisParameter, number=0, codec=INT32, readable=True, writeable=True):
    """The desired target position in position mode."""


class ActualPosition(AxisParameter, number=1, codec=INT32, readable=True, writeable=True):
    """
    The actual position of the motor.

    Stop the motor before overwriting it. Should normally only be
    overwritten for reference position setting.
    """


class TargetSpeed(AxisParameter, number=2, codec=INT32, readable=True, writeable=True):
    """The desired speed in velocity mode. Not valid in position mode."""


class ActualSpeed(AxisParameter, number=3, codec=INT32, readable=True):
    """The current rotation speed. Should never be overwritten."""


class MaximumPositioningSpeed(AxisParameter, number=4, codec=UINT32, readable=True, writeable=True):
    """
    The maximum positioning speed.

    Should not exceed the physically highest possible value. Adjust the pulse
    divisor (no. 154) if the speed value is very low (<50) or above the upper
    limit.
    """


class MaximumAcceleration(AxisParameter, number=5, codec=UINT32, readable=True, writeable=True):
    """Maximum acceleration during ramp-up and maximum deceleration during ramp-down."""


class AbsoluteMaxCurrent(AxisParameter, number=6, codec=UINT16, readable=True, writeable=True):
    """
    The absolute maximum current.

    The most important motor setting, since too high values might cause
    motor damage. On most modules 255 means 100% of the module's maximum
    current; on the TMCM-300, 303, 310, 110, 610, 611 and 612 the maximum
    value is 1500 (1.5A).
    """


class StandbyCurrent(AxisParameter, number=7, codec=UINT16, readable=True, writeable=True):
    """
    The current used when the motor is not running.

    Same scaling as AbsoluteMaxCurrent. Keep it as low as possible so the
    motor can cool down at standstill; see also PowerDownDelay (214).
    """


class PositionReachedFlag(AxisParameter, number=8, codec=BOOLEAN, readable=True):
    """Set when target position and actual position are equal."""


class HomeSwitchState(AxisParameter, number=9, codec=BOOLEAN, readable=True):
    """The logical state of the home switch input."""


class RightLimitSwitchState(AxisParameter, number=10, codec=BOOLEAN, readable=True):
    """The logical state of the right limit switch input."""


class LeftLimitSwitchState(AxisParameter, number=11, codec=BOOLEAN, readable=True):
    """The logical state of the left limit switch input."""


class RightLimitSwitchDisable(AxisParameter, number=12, codec=BOOLEAN, readable=True, writeable=True):
    """If set, deactivates the stop function of the right switch."""

    @classmethod
    def disabled(cls) -> "RightLimitSwitchDisable":
        return cls(True)

    @classmethod
    def enabled(cls) -> "RightLimitSwitchDisable":
        return cls(False)


class LeftLimitSwitchDisable(AxisParameter, number=13, codec=BOOLEAN, readable=True, writeable=True):
    """Deactivates the stop function of the left switch resp. reference switch if set."""

    @classmethod
    def disabled(cls) -> "LeftLimitSwitchDisable":
        return cls(True)

    @classmethod
    def enabled(cls) -> "LeftLimitSwitchDisable":
        return cls(False)


class MaximumDeceleration(AxisParameter, number=17, codec=UINT32, readable=True, writeable=True):
    """
    Maximum deceleration in positioning ramps, used to decelerate from the
    maximum positioning speed (4) to velocity V1. Not available on TMCM-1140.
    """


class MicrostepResolution(AxisParameter, number=140, codec=MICROSTEPS, readable=True, writeable=True):
    """Microstep resolution; see :class:`Microsteps`."""


class RampDivisor(AxisParameter, number=153, codec=DIVISOR, readable=True, writeable=True):
    """
    Exponent of the scaling factor for the ramp generator (0-13).

    Change carefully, in steps of one, and only while the motor is not
    moving. Lower values lead to higher accelerations.
    """


class PulseDivisor(AxisParameter, number=154, codec=DIVISOR, readable=True, writeable=True):
    """
    Exponent of the scaling factor for the pulse (step) generator (0-13).

    Change carefully, in steps of one, and only while the motor is not
    moving. Lower values lead to higher speeds.
    """


class ReferenceSearchMode(AxisParameter, number=193, codec=REFERENCE_SEARCH_MODE, readable=True, writeable=True):
    """
    Reference search mode.

    Holds a :class:`LimitSwitchSearch` or a :class:`HomeSearch`, e.g.
    ``ReferenceSearchMode(HomeSearch(HomeSearchMode.POSITIVE_THEN_RIGHT))``.
    """


class ReferenceSearchSpeed(AxisParameter, number=194, codec=UINT32, readable=True, writeable=True):
    """Speed for roughly searching the reference switch."""


class ReferenceSwitchSpeed(AxisParameter, number=195, codec=UINT32, readable=True, writeable=True):
    """Speed for searching the switching point. Should be slower than parameter 194."""


class EndSwitchDistance(AxisParameter, number=196, codec=INT32, readable=True):
    """Distance between the end switches after RFS with reference search mode 2 or 3."""


class LastReferencePosition(AxisParameter, number=197, codec=INT32, readable=True):
    """Last position value before the position counter is set to zero during reference search."""


class BoostCurrent(AxisParameter, number=200, codec=UINT8, readable=True, writeable=True):
    """
    Current used for acceleration and deceleration phases. If set to 0 the
    AbsoluteMaxCurrent (6) is used. Same scaling as parameter 6.
    """


class PowerDownDelay(AxisParameter, number=214, codec=UINT16, readable=True, writeable=True):
    """
    Standstill period before the motor current is switched to standby
    current, in units of 10 ms. The default of 200 means 2000 ms.
    """
