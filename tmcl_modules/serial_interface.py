# tmcl_modules/serial_interface.py
"""
Serial transport for TMCM modules (RS232, RS485 and USB virtual COM ports)
using pyserial. Commands and replies are exchanged as 9-byte addressed frames.
"""
from typing import Optional

import logging

import serial

from . import constants as const
from .exceptions import CommunicationError
from .exceptions import ConfigurationError
from .exceptions import TransportError
from .frames import Command
from .frames import Reply
from .interface import Interface

logger = logging.getLogger(__name__)


class SerialInterface(Interface):
    """
    Point-to-point or multi-drop serial connection.

    On a multi-drop (RS485) bus several modules share the port; each
    `TmcmModule` addresses its own module and the interface lock keeps their
    exchanges from interleaving.
    """

    def __init__(
        self,
        port: str,
        baudrate: int = const.SERIAL_DEFAULT_BAUDRATE,
        timeout: float = const.SERIAL_TIMEOUT_SECONDS,
        host_address: Optional[int] = None,
    ):
        """
        Initializes the serial interface.

        Args:
            port: Serial device, e.g. '/dev/ttyACM0' or 'COM3'.
            baudrate: Must match the module's configured baud rate.
            timeout: Read timeout in seconds for one reply.
            host_address: If given, replies must carry this reply address.
        """
        super().__init__()
        if not port:
            raise ConfigurationError("A serial port must be specified.")
        self.port = port
        self.baudrate = baudrate
        self.timeout = timeout
        self.host_address = host_address
        self.serial: Optional[serial.Serial] = None
        logger.info(f"SerialInterface configured for {port} @ {baudrate} baud")

    def connect(self):
        """Opens the serial port."""
        try:
            logger.info(f"Attempting to open serial port {self.port} @ {self.baudrate} baud")
            self.serial = serial.Serial(port=self.port, baudrate=self.baudrate, timeout=self.timeout)
        except (serial.SerialException, ValueError) as e:
            logger.error(f"Failed to open serial port {self.port}: {e}", exc_info=True)
            raise TransportError(f"Failed to open serial port {self.port}: {e}") from e
        logger.info(f"Successfully opened serial port {self.port}.")

    def disconnect(self):
        """Closes the serial port."""
        if self.serial is not None:
            try:
                self.serial.close()
                logger.info(f"Closed serial port {self.port}.")
            except serial.SerialException as e:
                logger.warning(f"Error while closing serial port {self.port}: {e}")
            finally:
                self.serial = None

    @property
    def is_connected(self) -> bool:
        return self.serial is not None and self.serial.is_open

    def _port(self) -> serial.Serial:
        if not self.is_connected:
            raise ConfigurationError(f"Serial port {self.port} is not open.")
        return self.serial

    def transmit_command(self, command: Command) -> None:
        frame = command.serialize()
        port = self._port()
        try:
            # Drop stale bytes so the next read starts on a frame boundary.
            port.reset_input_buffer()
            written = port.write(frame)
            port.flush()
        except serial.SerialException as e:
            logger.error(f"Serial write failed on {self.port}: {e}", exc_info=True)
            raise TransportError(f"Serial write failed on {self.port}: {e}") from e
        if written is not None and written != len(frame):
            raise CommunicationError(
                f"Short write on {self.port}: {written} of {len(frame)} bytes",
                module_address=command.module_address,
            )
        logger.debug(f"Sent on {self.port}: {frame.hex(' ').upper()}")

    def receive_reply(self) -> Reply:
        port = self._port()
        try:
            frame = port.read(const.REPLY_FRAME_LENGTH)
        except serial.SerialException as e:
            logger.error(f"Serial read failed on {self.port}: {e}", exc_info=True)
            raise TransportError(f"Serial read failed on {self.port}: {e}") from e
        if len(frame) < const.REPLY_FRAME_LENGTH:
            raise CommunicationError(
                f"Timeout waiting for reply on {self.port}: got {len(frame)} of "
                f"{const.REPLY_FRAME_LENGTH} bytes ({bytes(frame).hex()})"
            )
        logger.debug(f"Received on {self.port}: {bytes(frame).hex(' ').upper()}")
        reply = Reply.from_bytes(frame)
        if self.host_address is not None and reply.reply_address != self.host_address:
            raise CommunicationError(
                f"Reply addressed to {reply.reply_address}, expected host address {self.host_address}",
                module_address=reply.module_address,
            )
        return reply
