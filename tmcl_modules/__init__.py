"""
TMCL Modules Communication Library
==================================

This library speaks the TMCL binary command protocol of Trinamic TMCM
stepper motor controller modules. It includes typed instructions and axis
parameters, the addressed (RS232/RS485/USB) and CAN frame formats, serial and
CAN transports, and a synchronous command executor.
"""

# Import the constants module and alias it as 'const' for patterned access
from . import constants as const

from .axis_parameters import (
    AXIS_PARAMETERS,
    AbsoluteMaxCurrent,
    ActualPosition,
    ActualSpeed,
    AxisParameter,
    BoostCurrent,
    Capability,
    EndSwitchDistance,
    HomeSearch,
    HomeSearchMode,
    HomeSwitchState,
    LastReferencePosition,
    LeftLimitSwitchDisable,
    LeftLimitSwitchState,
    LimitSwitchSearch,
    MaximumAcceleration,
    MaximumDeceleration,
    MaximumPositioningSpeed,
    MicrostepResolution,
    Microsteps,
    PositionReachedFlag,
    PowerDownDelay,
    PulseDivisor,
    RampDivisor,
    ReferenceSearchMode,
    ReferenceSearchSpeed,
    ReferenceSwitchSpeed,
    RightLimitSwitchDisable,
    RightLimitSwitchState,
    SearchMode,
    StandbyCurrent,
    TargetPosition,
    TargetSpeed,
    axis_parameter,
)
from .can_interface import CANInterface
from .checksum import calculate_checksum, verify_checksum
from .exceptions import (
    CANError,
    CapabilityError,
    ChecksumError,
    CommunicationError,
    ConfigurationError,
    FramingError,
    InterfaceUnavailableError,
    InvalidEnumerationError,
    OperandDecodeError,
    ParameterError,
    StatusError,
    TMCLError,
    TransportError,
    TruncatedReplyError,
    UnrecognizedStatusError,
)
from .frames import Command, Reply
from .instructions import (
    CALC,
    GAP,
    GIO,
    MST,
    MVP,
    RFS,
    ROL,
    ROR,
    RSAP,
    SAP,
    SIO,
    STAP,
    CalcOperation,
    Instruction,
    MoveType,
    ReferenceSearchAction,
)
from .interface import Interface
from .module import ExchangeState, TmcmModule
from .serial_interface import SerialInterface
from .status import ErrStatus, OkStatus, decode_status

__version__ = "0.1.0"

__all__ = [
    "const",

    # Executor and transports
    "TmcmModule",
    "ExchangeState",
    "Interface",
    "SerialInterface",
    "CANInterface",

    # Frames and status
    "Command",
    "Reply",
    "OkStatus",
    "ErrStatus",
    "decode_status",
    "calculate_checksum",
    "verify_checksum",

    # Instructions
    "Instruction",
    "ROR",
    "ROL",
    "MST",
    "MVP",
    "SAP",
    "GAP",
    "STAP",
    "RSAP",
    "RFS",
    "SIO",
    "GIO",
    "CALC",
    "MoveType",
    "ReferenceSearchAction",
    "CalcOperation",

    # Axis parameters
    "AXIS_PARAMETERS",
    "AxisParameter",
    "Capability",
    "axis_parameter",
    "TargetPosition",
    "ActualPosition",
    "TargetSpeed",
    "ActualSpeed",
    "MaximumPositioningSpeed",
    "MaximumAcceleration",
    "AbsoluteMaxCurrent",
    "StandbyCurrent",
    "PositionReachedFlag",
    "HomeSwitchState",
    "RightLimitSwitchState",
    "LeftLimitSwitchState",
    "RightLimitSwitchDisable",
    "LeftLimitSwitchDisable",
    "MaximumDeceleration",
    "MicrostepResolution",
    "Microsteps",
    "RampDivisor",
    "PulseDivisor",
    "ReferenceSearchMode",
    "LimitSwitchSearch",
    "HomeSearch",
    "SearchMode",
    "HomeSearchMode",
    "ReferenceSearchSpeed",
    "ReferenceSwitchSpeed",
    "EndSwitchDistance",
    "LastReferencePosition",
    "BoostCurrent",
    "PowerDownDelay",

    # Exceptions
    "TMCLError",
    "ParameterError",
    "ConfigurationError",
    "CapabilityError",
    "TransportError",
    "CommunicationError",
    "CANError",
    "InterfaceUnavailableError",
    "FramingError",
    "ChecksumError",
    "TruncatedReplyError",
    "UnrecognizedStatusError",
    "OperandDecodeError",
    "InvalidEnumerationError",
    "StatusError",
]
