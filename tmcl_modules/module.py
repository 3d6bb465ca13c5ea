# tmcl_modules/module.py
"""
Command executor for TMCM modules other than TMCM-100 and Monopack 2.

`TmcmModule` drives one synchronous request/reply exchange per call:

    IDLE -> SENDING -> AWAITING_REPLY -> DONE | FAILED

It keeps no state between calls, never retries and never caches. Whether a
failed instruction may safely be sent again is for the caller to decide.
"""
from enum import Enum
from typing import Any, Optional, Type, Union

import logging

from . import constants as const
from .axis_parameters import AxisParameter
from .exceptions import InterfaceUnavailableError
from .exceptions import StatusError
from .exceptions import TMCLError
from .exceptions import TransportError
from .frames import Command
from .frames import _check_address
from .instructions import CALC
from .instructions import GAP
from .instructions import GIO
from .instructions import MST
from .instructions import MVP
from .instructions import RFS
from .instructions import ROL
from .instructions import ROR
from .instructions import RSAP
from .instructions import SAP
from .instructions import SIO
from .instructions import STAP
from .instructions import CalcOperation
from .instructions import Instruction
from .instructions import ReferenceSearchAction
from .instructions import instruction_name
from .interface import Interface

logger = logging.getLogger(__name__)


class ExchangeState(Enum):
    IDLE = "idle"
    SENDING = "sending"
    AWAITING_REPLY = "awaiting_reply"
    DONE = "done"
    FAILED = "failed"


class TmcmModule:
    """
    One TMCM module reachable through an `Interface`.

    Several modules may share an interface (e.g. on an RS485 or CAN bus);
    their exchanges are serialized through the interface lock.
    """

    def __init__(
        self,
        interface: Interface,
        address: int = const.DEFAULT_MODULE_ADDRESS,
        lock_timeout: Optional[float] = None,
    ):
        """
        Args:
            interface: The transport used to reach the module.
            address: The module address (0-255). Ignored by CAN, which
                     addresses the module through the arbitration ID.
            lock_timeout: Seconds to wait for the interface when another
                          caller is using it. None waits indefinitely.
        """
        self.interface = interface
        self.address = _check_address("Module address", address)
        self.lock_timeout = lock_timeout

    def _acquire(self) -> None:
        timeout = -1 if self.lock_timeout is None else self.lock_timeout
        if not self.interface.lock.acquire(timeout=timeout):
            raise InterfaceUnavailableError(
                f"Interface busy: could not acquire it within {self.lock_timeout}s",
                module_address=self.address,
            )

    def write_command(self, instruction: Instruction) -> Any:
        """
        Synchronously writes an instruction and waits for the reply.

        Returns:
            The instruction's decoded reply value (None for instructions
            without a return value).

        Raises:
            InterfaceUnavailableError: if the interface lock could not be acquired.
            TransportError: if sending or receiving failed; ``stage`` tells which.
            FramingError: if the reply could not be interpreted.
            StatusError: if the module rejected the command.
        """
        command = Command(self.address, instruction)
        mnemonic = instruction_name(instruction.instruction_number)
        self._acquire()
        state = ExchangeState.IDLE
        try:
            state = ExchangeState.SENDING
            logger.debug(f"Module {self.address}: {state.value} {command!r}")
            self.interface.transmit_command(command)

            state = ExchangeState.AWAITING_REPLY
            reply = self.interface.receive_reply()
        except TransportError as e:
            if e.stage is None:
                e.stage = state
            logger.debug(f"Module {self.address}: {ExchangeState.FAILED.value} while {state.value}: {e}")
            raise
        except TMCLError:
            raise
        except Exception as e:
            logger.error(f"Unexpected interface error while {state.value}: {e}", exc_info=True)
            raise TransportError(
                f"Interface failed while {state.value} {mnemonic}: {e}",
                stage=state,
                module_address=self.address,
            ) from e
        finally:
            self.interface.lock.release()

        if reply.command_number != instruction.instruction_number:
            logger.warning(
                f"Module {self.address}: reply echoes {instruction_name(reply.command_number)}, "
                f"expected {mnemonic}"
            )
        if not reply.is_ok:
            logger.debug(f"Module {self.address}: {ExchangeState.FAILED.value}, status {reply.status.name}")
            raise StatusError(
                f"{mnemonic} rejected: {reply.status.description}",
                reply.status,
                module_address=reply.module_address,
                command_number=reply.command_number,
            )
        logger.debug(f"Module {self.address}: {ExchangeState.DONE.value} {reply!r}")
        return instruction.decode_reply(reply.operand)

    # --- Axis parameters ---

    def get_axis_parameter(self, parameter: Type[AxisParameter], motor_number: int = 0) -> Any:
        """Reads an axis parameter and returns its native value."""
        return self.write_command(GAP(motor_number, parameter))

    def set_axis_parameter(self, parameter: AxisParameter, motor_number: int = 0) -> None:
        self.write_command(SAP(motor_number, parameter))

    def store_axis_parameter(self, parameter: Union[AxisParameter, Type[AxisParameter]], motor_number: int = 0) -> None:
        """Stores the current RAM value of an axis parameter to EEPROM."""
        self.write_command(STAP(motor_number, parameter))

    def restore_axis_parameter(self, parameter: Union[AxisParameter, Type[AxisParameter]], motor_number: int = 0) -> None:
        """Restores an axis parameter from EEPROM."""
        self.write_command(RSAP(motor_number, parameter))

    # --- Motion ---

    def rotate_right(self, velocity: int, motor_number: int = 0) -> None:
        self.write_command(ROR(motor_number, velocity))

    def rotate_left(self, velocity: int, motor_number: int = 0) -> None:
        self.write_command(ROL(motor_number, velocity))

    def stop(self, motor_number: int = 0) -> None:
        self.write_command(MST(motor_number))

    def move_to(self, position: int, motor_number: int = 0) -> None:
        """Starts an absolute move; does not wait for it to finish."""
        self.write_command(MVP.absolute(motor_number, position))

    def move_by(self, offset: int, motor_number: int = 0) -> None:
        """Starts a relative move; does not wait for it to finish."""
        self.write_command(MVP.relative(motor_number, offset))

    def reference_search(
        self,
        action: ReferenceSearchAction = ReferenceSearchAction.START,
        motor_number: int = 0,
    ) -> Optional[bool]:
        """Starts, stops or polls a reference search. Polling returns True while running."""
        return self.write_command(RFS(motor_number, action))

    # --- I/O and arithmetic ---

    def set_output(self, port_number: int, state: bool, bank_number: int = const.BANK_DIGITAL_OUTPUTS) -> None:
        self.write_command(SIO(port_number, state, bank_number))

    def get_input(self, port_number: int, bank_number: int = const.BANK_DIGITAL_INPUTS) -> Union[int, bool]:
        return self.write_command(GIO(port_number, bank_number))

    def calculate(self, operation: CalcOperation, value: int = 0) -> None:
        self.write_command(CALC(operation, value))

    def __repr__(self):
        return f"TmcmModule(address={self.address}, interface={type(self.interface).__name__})"
