"""
Shared test fixtures for the TMCL modules library.

The executor tests run against `StubInterface`, an in-memory transport that
records every command it is asked to send and answers with queued replies.
A queued exception is raised instead of being returned, and
``transmit_error`` makes sending fail, so tests can drive the executor into
each of its failure stages without hardware.

## Usage

```python
def test_get_position(module, stub_interface, make_reply):
    stub_interface.queue(make_reply(const.CMD_GAP, operand=bytes([0, 0, 3, 232])))
    assert module.get_axis_parameter(ActualPosition) == 1000
```
"""
from typing import List, Optional, Union

import pytest

from tmcl_modules import constants as const
from tmcl_modules.frames import Command
from tmcl_modules.frames import Reply
from tmcl_modules.interface import Interface
from tmcl_modules.module import TmcmModule
from tmcl_modules.status import OkStatus


class StubInterface(Interface):
    """Transport double that records commands and plays back replies."""

    def __init__(self):
        super().__init__()
        self.sent: List[Command] = []
        self.replies: List[Union[Reply, Exception]] = []
        self.connected = False
        self.transmit_error: Optional[Exception] = None
        self.lock_held_during_transmit = None

    def queue(self, *replies: Union[Reply, Exception]) -> None:
        self.replies.extend(replies)

    def connect(self):
        self.connected = True

    def disconnect(self):
        self.connected = False

    @property
    def is_connected(self) -> bool:
        return self.connected

    def transmit_command(self, command: Command) -> None:
        self.lock_held_during_transmit = self.lock.locked()
        self.sent.append(command)
        if self.transmit_error is not None:
            raise self.transmit_error

    def receive_reply(self) -> Reply:
        if not self.replies:
            raise AssertionError("StubInterface has no queued reply")
        reply = self.replies.pop(0)
        if isinstance(reply, Exception):
            raise reply
        return reply


@pytest.fixture
def stub_interface():
    return StubInterface()


@pytest.fixture
def module(stub_interface):
    return TmcmModule(stub_interface, address=const.DEFAULT_MODULE_ADDRESS)


@pytest.fixture
def make_reply():
    """Factory for replies as the module at address 1 would send them."""

    def _make_reply(
        command_number: int,
        status=OkStatus.OK,
        operand: bytes = bytes(4),
        module_address: int = const.DEFAULT_MODULE_ADDRESS,
    ) -> Reply:
        return Reply(
            status=status,
            command_number=command_number,
            operand=operand,
            module_address=module_address,
            reply_address=const.DEFAULT_HOST_ADDRESS,
        )

    return _make_reply
