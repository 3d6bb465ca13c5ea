# tmcl_modules/constants.py
"""
Constants for the TMCL modules library.
Includes TMCL instruction numbers, type numbers, status codes, frame sizes,
default addresses and transport defaults derived from the TMCL firmware
manuals of the TMCM module family.
"""

# Frame layout
OPERAND_LENGTH = 4
ADDRESSED_FRAME_LENGTH = 9  # [ADDR, CMD, TYPE, MOTOR, V3, V2, V1, V0, CHECKSUM]
BUS_FRAME_LENGTH = 7        # [CMD, TYPE, MOTOR, V3, V2, V1, V0]
REPLY_FRAME_LENGTH = 9      # [REPLY_ADDR, MODULE_ADDR, STATUS, CMD, V3..V0, CHECKSUM]
CAN_REPLY_FRAME_LENGTH = 7  # [MODULE_ADDR, STATUS, CMD, V3..V0]

# Addresses
DEFAULT_MODULE_ADDRESS = 1
DEFAULT_HOST_ADDRESS = 2    # Reply address used by the module when answering
MAX_ADDRESS = 0xFF

# Serial (RS232 / RS485 / USB virtual COM port) defaults
SERIAL_DEFAULT_BAUDRATE = 9600
SERIAL_TIMEOUT_SECONDS = 1.0

# CAN defaults
CAN_DEFAULT_BITRATE = 1000000  # 1 Mbit/s
CAN_TIMEOUT_SECONDS = 1.0
DEFAULT_CAN_TRANSMIT_ID = 1    # ID the module listens on
DEFAULT_CAN_REPLY_ID = 2       # ID the module answers with
MAX_CAN_STANDARD_ID = 0x7FF

# Instruction numbers
CMD_ROR = 1    # Rotate right
CMD_ROL = 2    # Rotate left
CMD_MST = 3    # Motor stop
CMD_MVP = 4    # Move to position
CMD_SAP = 5    # Set axis parameter
CMD_GAP = 6    # Get axis parameter
CMD_STAP = 7   # Store axis parameter
CMD_RSAP = 8   # Restore axis parameter
CMD_RFS = 13   # Reference search
CMD_SIO = 14   # Set output
CMD_GIO = 15   # Get input/output
CMD_CALC = 19  # Calculate

# MVP type numbers
MVP_ABSOLUTE = 0
MVP_RELATIVE = 1
MVP_COORDINATE = 2

# RFS type numbers
RFS_START = 0
RFS_STOP = 1
RFS_STATUS = 2

# SIO/GIO banks
BANK_DIGITAL_INPUTS = 0
BANK_ANALOG_INPUTS = 1
BANK_DIGITAL_OUTPUTS = 2

# CALC type numbers
CALC_ADD = 0
CALC_SUB = 1
CALC_MUL = 2
CALC_DIV = 3
CALC_MOD = 4
CALC_AND = 5
CALC_OR = 6
CALC_XOR = 7
CALC_NOT = 8
CALC_LOAD = 9

# Reply status codes
STATUS_OK = 100
STATUS_LOADED_INTO_EEPROM = 101
STATUS_WRONG_CHECKSUM = 1
STATUS_INVALID_COMMAND = 2
STATUS_WRONG_TYPE = 3
STATUS_INVALID_VALUE = 4
STATUS_EEPROM_LOCKED = 5
STATUS_COMMAND_NOT_AVAILABLE = 6

# Reference search mode modifier bits (axis parameter 193)
RFS_MODE_BASE_MASK = 0x3F
RFS_MODE_SWAP_LEFT_RIGHT = 64
RFS_MODE_INVERT_HOME_SWITCH = 128

# Largest ramp/pulse divisor accepted by the ramp generator
MAX_DIVISOR = 13
