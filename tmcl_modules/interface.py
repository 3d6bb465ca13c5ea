# tmcl_modules/interface.py
"""
Transport abstraction for TMCM modules.

A module can be reached over RS232, RS485, USB (virtual COM port), CAN or
I2C. Each medium has its own `Interface` implementation that owns its
framing; all of them exchange `Command` and `Reply` objects with the
executor.
"""
from abc import ABC
from abc import abstractmethod

import threading

from .frames import Command
from .frames import Reply


class Interface(ABC):
    """
    A duplex channel to one or more TMCM modules.

    ``lock`` is the mutual exclusion boundary of the channel: a module
    processes one command at a time and replies carry no request id, so
    every `TmcmModule` using this interface holds the lock for a whole
    request/reply exchange.
    """

    def __init__(self):
        self.lock = threading.Lock()

    @abstractmethod
    def connect(self):
        """Opens the underlying medium."""

    @abstractmethod
    def disconnect(self):
        """Closes the underlying medium."""

    @property
    @abstractmethod
    def is_connected(self) -> bool:
        """True while the underlying medium is open."""

    @abstractmethod
    def transmit_command(self, command: Command) -> None:
        """Sends one command. Raises TransportError on failure."""

    @abstractmethod
    def receive_reply(self) -> Reply:
        """Blocks for and parses exactly one reply. Raises TransportError on failure."""

    def __enter__(self):
        self.connect()
        return self

    def __exit__(self, exc_type, exc_value, traceback):
        self.disconnect()
