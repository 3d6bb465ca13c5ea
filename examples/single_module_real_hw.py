# This script demonstrates how to control a single TMCM stepper motor module over a real serial
# (RS232/RS485/USB) or CAN connection. Adjust the configuration constants below for your setup.

"""
Example: Configuring and moving a single TMCM module on real hardware.
"""

import logging
import time

from tmcl_modules import ActualPosition
from tmcl_modules import CANInterface
from tmcl_modules import MaximumPositioningSpeed
from tmcl_modules import MicrostepResolution
from tmcl_modules import Microsteps
from tmcl_modules import PositionReachedFlag
from tmcl_modules import SerialInterface
from tmcl_modules import TmcmModule
from tmcl_modules import const
from tmcl_modules import exceptions

logging.basicConfig(
    level=logging.INFO, format="%(asctime)s - %(levelname)s - %(message)s"
)
logger = logging.getLogger(__name__)

# Connection configuration (MODIFY THESE FOR YOUR SETUP)
USE_CAN = False

SERIAL_PORT = "/dev/ttyACM0"  # e.g., '/dev/ttyUSB0', 'COM3'
SERIAL_BAUDRATE = const.SERIAL_DEFAULT_BAUDRATE  # Must match the module's RS232/RS485 setting
MODULE_ADDRESS = const.DEFAULT_MODULE_ADDRESS

CAN_INTERFACE_TYPE = "socketcan"  # e.g., 'socketcan', 'pcan', 'kvaser'
CAN_CHANNEL = "can0"  # e.g., 'can0', 'PCAN_USBBUS1'
CAN_BITRATE = const.CAN_DEFAULT_BITRATE  # Must match the module's CAN bitrate
CAN_TRANSMIT_ID = const.DEFAULT_CAN_TRANSMIT_ID
CAN_REPLY_ID = const.DEFAULT_CAN_REPLY_ID

MOTOR = 0
TARGET_POSITION = 51200  # One revolution of a 200 step motor at 256 microsteps


def make_interface():
    if USE_CAN:
        return CANInterface(
            interface_type=CAN_INTERFACE_TYPE,
            channel=CAN_CHANNEL,
            bitrate=CAN_BITRATE,
            transmit_id=CAN_TRANSMIT_ID,
            reply_id=CAN_REPLY_ID,
        )
    return SerialInterface(SERIAL_PORT, baudrate=SERIAL_BAUDRATE)


def wait_until_position_reached(module: TmcmModule, timeout: float = 30.0) -> bool:
    """Polls the position reached flag until it is set or the timeout expires."""
    deadline = time.monotonic() + timeout
    while time.monotonic() < deadline:
        if module.get_axis_parameter(PositionReachedFlag, MOTOR):
            return True
        time.sleep(0.1)
    return False


def main():
    """Main function to control a single real hardware module."""
    logger.info("Starting single module real hardware example...")

    try:
        with make_interface() as interface:
            module = TmcmModule(interface, address=MODULE_ADDRESS, lock_timeout=5.0)

            module.set_axis_parameter(MicrostepResolution(Microsteps.MICRO256), MOTOR)
            module.set_axis_parameter(MaximumPositioningSpeed(1000), MOTOR)

            start = module.get_axis_parameter(ActualPosition, MOTOR)
            logger.info(f"Start position: {start}")

            module.move_to(TARGET_POSITION, MOTOR)
            if not wait_until_position_reached(module):
                logger.warning("Target position not reached in time; stopping motor.")
                module.stop(MOTOR)

            logger.info(f"Final position: {module.get_axis_parameter(ActualPosition, MOTOR)}")

            module.move_to(start, MOTOR)
            wait_until_position_reached(module)
    except exceptions.StatusError as e:
        logger.error(f"Module rejected a command: {e}")
    except exceptions.TransportError as e:
        logger.error(f"Communication failed while {e.stage.value if e.stage else 'connecting'}: {e}")
        logger.error("Check the connection settings and that the module is powered.")
    except exceptions.TMCLError as e:
        logger.error(f"TMCL error: {e}")

    logger.info("Single module example finished.")


if __name__ == "__main__":
    try:
        main()
    except KeyboardInterrupt:
        logger.info("Program interrupted by user.")
