# tmcl_modules/checksum.py
"""
Checksum calculation utility for TMCL addressed frames.
"""
from typing import Iterable

from .exceptions import ParameterError


def calculate_checksum(frame_bytes: Iterable[int]) -> int:
    """
    Calculates the 8-bit checksum of a TMCL frame.
    The formula is CHECKSUM = (byte0 + byte1 + ... + byte(n)) & 0xFF.

    Args:
        frame_bytes: The frame bytes preceding the checksum byte
                     (module address, command, type, motor/bank, value).

    Returns:
        The calculated 8-bit checksum.

    Raises:
        ParameterError: if frame_bytes is empty or holds a non-byte value.
    """
    frame_bytes = list(frame_bytes)
    if not frame_bytes:
        raise ParameterError("Frame bytes cannot be empty for checksum calculation.")
    if not all(0 <= b <= 0xFF for b in frame_bytes):
        raise ParameterError("All frame bytes must be in range 0-255.")

    return sum(frame_bytes) & 0xFF


def verify_checksum(received_bytes: Iterable[int]) -> bool:
    """
    Verifies the checksum of a received TMCL frame.

    Args:
        received_bytes: All frame bytes, INCLUDING the received checksum byte
                        as the last element.

    Returns:
        True if the checksum is valid, False otherwise.

    Raises:
        ParameterError: if the frame is too short to carry a checksum.
    """
    received_bytes = list(received_bytes)
    if len(received_bytes) < 2:
        raise ParameterError("Received bytes are too short to verify checksum (must include data and checksum).")

    return calculate_checksum(received_bytes[:-1]) == received_bytes[-1]
