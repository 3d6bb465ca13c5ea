# tmcl_modules/can_interface.py
"""
CAN transport for TMCM modules using python-can.

The module listens on one standard CAN ID and answers on another, so the
addressing is carried by the arbitration ID rather than the frame: commands
go out as 7-byte bus frames and `Command.module_address` is ignored.
"""
from typing import Optional

import logging
import time

import can

from . import constants as const
from .exceptions import CANError
from .exceptions import CommunicationError
from .exceptions import ConfigurationError
from .frames import Command
from .frames import Reply
from .interface import Interface

logger = logging.getLogger(__name__)


class CANInterface(Interface):
    """
    Manages CAN communication with one TMCM module.

    Several modules on the same bus can share a single `can.BusABC` by
    passing it as ``bus``; only the interface that opened the bus shuts it
    down.
    """

    def __init__(
        self,
        interface_type: str = "socketcan",
        channel: Optional[str] = None,
        bitrate: int = const.CAN_DEFAULT_BITRATE,
        transmit_id: int = const.DEFAULT_CAN_TRANSMIT_ID,
        reply_id: int = const.DEFAULT_CAN_REPLY_ID,
        timeout: float = const.CAN_TIMEOUT_SECONDS,
        bus: Optional[can.BusABC] = None,
    ):
        """
        Initializes the CAN interface.

        Args:
            interface_type: python-can interface name (e.g., 'socketcan', 'pcan', 'kvaser').
            channel: Channel specific to the interface (e.g., 'can0', 'PCAN_USBBUS1').
            bitrate: CAN bus bitrate; must match the module setting.
            transmit_id: CAN ID the module receives commands on.
            reply_id: CAN ID the module sends its replies with.
            timeout: Seconds to wait for one reply.
            bus: An already opened bus to use instead of opening one.
        """
        super().__init__()
        for name, can_id in (("transmit_id", transmit_id), ("reply_id", reply_id)):
            if not (0 <= can_id <= const.MAX_CAN_STANDARD_ID):
                raise ConfigurationError(f"{name} {can_id} is out of valid range 0-2047.")
        self.interface_type = interface_type
        self.channel = channel
        self.bitrate = bitrate
        self.transmit_id = transmit_id
        self.reply_id = reply_id
        self.timeout = timeout
        self.bus: Optional[can.BusABC] = bus
        self._owns_bus = bus is None
        logger.info(
            f"CANInterface configured: {interface_type} on {channel} @ {bitrate} bps, "
            f"TX ID {transmit_id:03X}, reply ID {reply_id:03X}"
        )

    def connect(self):
        """Opens the CAN bus unless one was handed in."""
        if self.bus is not None:
            return
        if not self.channel and self.interface_type != "virtual":
            raise ConfigurationError(f"Channel must be specified for {self.interface_type} interface.")
        try:
            logger.info(
                f"Attempting to connect to CAN hardware: type={self.interface_type}, "
                f"channel={self.channel}, bitrate={self.bitrate}"
            )
            self.bus = can.Bus(interface=self.interface_type, channel=self.channel, bitrate=self.bitrate)
            self._owns_bus = True
        except can.CanError as e:
            logger.error(f"Failed to connect to CAN bus: {e}", exc_info=True)
            raise CANError(
                f"Failed to initialize CAN bus ({self.interface_type} on {self.channel}): {e}"
            ) from e
        except Exception as e:
            logger.error(
                f"An unexpected error occurred during CAN bus connection: {e}",
                exc_info=True,
            )
            raise CANError(
                f"Unexpected error connecting to CAN bus: {e}"
            ) from e
        logger.info(f"Successfully connected to CAN bus: {self.bus.channel_info}")

    def disconnect(self):
        """Shuts the bus down if this interface opened it."""
        if self.bus is None:
            return
        if self._owns_bus:
            try:
                self.bus.shutdown()
                logger.info("Disconnected from CAN bus.")
            except can.CanError as e:
                logger.warning(f"Error during CAN bus shutdown: {e}")
        self.bus = None

    @property
    def is_connected(self) -> bool:
        return self.bus is not None

    def _bus(self) -> can.BusABC:
        if self.bus is None:
            raise ConfigurationError("CAN bus not connected.")
        return self.bus

    def transmit_command(self, command: Command) -> None:
        msg = can.Message(
            arbitration_id=self.transmit_id,
            data=command.serialize_can(),
            is_extended_id=False,
        )
        try:
            self._bus().send(msg, timeout=self.timeout)
        except can.CanError as e:
            logger.error(f"Failed to send CAN message: {e}", exc_info=True)
            raise CANError(f"Failed to send CAN message: {e}") from e
        logger.debug(
            f"Sent on CAN bus: ID={msg.arbitration_id:03X}, DLC={msg.dlc}, "
            f"Data={' '.join(f'{b:02X}' for b in msg.data)}"
        )

    def receive_reply(self) -> Reply:
        bus = self._bus()
        deadline = time.monotonic() + self.timeout
        while True:
            remaining = deadline - time.monotonic()
            if remaining <= 0:
                raise CommunicationError(
                    f"Timeout waiting for reply on CAN ID {self.reply_id:03X}"
                )
            try:
                msg = bus.recv(timeout=remaining)
            except can.CanError as e:
                logger.error(f"CAN receive failed: {e}", exc_info=True)
                raise CANError(f"CAN receive failed: {e}") from e
            if msg is None:
                continue
            if msg.arbitration_id != self.reply_id or msg.is_error_frame or msg.is_remote_frame:
                logger.warning(f"Skipping CAN frame ID={msg.arbitration_id:03X} Data={msg.data.hex()}")
                continue
            logger.debug(
                f"Received on CAN bus: ID={msg.arbitration_id:03X}, DLC={msg.dlc}, "
                f"Data={' '.join(f'{b:02X}' for b in msg.data)}"
            )
            return Reply.from_can_bytes(msg.data[: msg.dlc])
