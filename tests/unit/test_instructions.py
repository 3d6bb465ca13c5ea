# tests/unit/test_instructions.py
import pytest

from tmcl_modules import constants as const
from tmcl_modules.axis_parameters import AXIS_PARAMETERS
from tmcl_modules.axis_parameters import ActualPosition
from tmcl_modules.axis_parameters import ActualSpeed
from tmcl_modules.axis_parameters import AxisParameter
from tmcl_modules.axis_parameters import Capability
from tmcl_modules.axis_parameters import HomeSearch
from tmcl_modules.axis_parameters import HomeSearchMode
from tmcl_modules.axis_parameters import MicrostepResolution
from tmcl_modules.axis_parameters import Microsteps
from tmcl_modules.axis_parameters import PositionReachedFlag
from tmcl_modules.axis_parameters import ReferenceSearchMode
from tmcl_modules.axis_parameters import TargetPosition
from tmcl_modules.codec import INT32
from tmcl_modules.exceptions import CapabilityError
from tmcl_modules.exceptions import OperandDecodeError
from tmcl_modules.exceptions import ParameterError
from tmcl_modules.instructions import CALC
from tmcl_modules.instructions import GAP
from tmcl_modules.instructions import GIO
from tmcl_modules.instructions import Instruction
from tmcl_modules.instructions import MST
from tmcl_modules.instructions import MVP
from tmcl_modules.instructions import RFS
from tmcl_modules.instructions import ROL
from tmcl_modules.instructions import ROR
from tmcl_modules.instructions import RSAP
from tmcl_modules.instructions import SAP
from tmcl_modules.instructions import SIO
from tmcl_modules.instructions import STAP
from tmcl_modules.instructions import CalcOperation
from tmcl_modules.instructions import MoveType
from tmcl_modules.instructions import ReferenceSearchAction
from tmcl_modules.instructions import instruction_name


@pytest.fixture
def write_only_parameter():
    """A parameter that can be set but not read back; the catalog has none."""

    class WriteOnlyTestParameter(AxisParameter, number=250, codec=INT32, writeable=True):
        pass

    yield WriteOnlyTestParameter
    del AXIS_PARAMETERS[250]


class TestInstructionNumbers:
    @pytest.mark.parametrize(
        "instruction,number,mnemonic",
        [
            (ROR(0, 500), 1, "ROR"),
            (ROL(0, 500), 2, "ROL"),
            (MST(0), 3, "MST"),
            (MVP(0, 1000), 4, "MVP"),
            (SAP(0, TargetPosition(0)), 5, "SAP"),
            (GAP(0, ActualPosition), 6, "GAP"),
            (STAP(0, TargetPosition), 7, "STAP"),
            (RSAP(0, TargetPosition), 8, "RSAP"),
            (RFS(0), 13, "RFS"),
            (SIO(1, True), 14, "SIO"),
            (GIO(1), 15, "GIO"),
            (CALC(CalcOperation.ADD, 1), 19, "CALC"),
        ],
    )
    def test_fixed_instruction_numbers(self, instruction, number, mnemonic):
        assert instruction.instruction_number == number
        assert instruction_name(number) == mnemonic
        assert "INSTRUCTION_NUMBER" not in vars(instruction)

    def test_unknown_instruction_name(self):
        assert instruction_name(99) == "#99"

    def test_base_class_cannot_be_sent(self):
        with pytest.raises(ParameterError, match="no instruction number"):
            Instruction(0, 0)


class TestMotion:
    def test_rotate(self):
        ror = ROR(1, 500)
        assert (ror.type_number, ror.motor_bank_number, ror.operand) == (0, 1, bytes([0, 0, 1, 0xF4]))
        assert ROL(0, -1).operand == bytes([0xFF] * 4)

    def test_stop(self):
        mst = MST(2)
        assert (mst.type_number, mst.motor_bank_number, mst.operand) == (0, 2, bytes(4))

    def test_move_types(self):
        assert MVP.absolute(0, 1000).type_number == const.MVP_ABSOLUTE
        assert MVP.relative(0, -1000).type_number == const.MVP_RELATIVE
        assert MVP.relative(0, -1000).operand == bytes([0xFF, 0xFF, 0xFC, 0x18])
        assert MVP.coordinate(0, 3).move_type is MoveType.COORDINATE
        assert MVP(0, 1000) == MVP.absolute(0, 1000)

    def test_coordinate_number_must_be_unsigned(self):
        with pytest.raises(ParameterError):
            MVP.coordinate(0, -1)

    def test_invalid_move_type(self):
        with pytest.raises(ParameterError, match="MoveType"):
            MVP(0, 0, 7)

    def test_velocity_out_of_range(self):
        with pytest.raises(ParameterError):
            ROR(0, 2 ** 31)

    @pytest.mark.parametrize("motor_number", [-1, 256, True, "0"])
    def test_invalid_motor_number(self, motor_number):
        with pytest.raises(ParameterError, match="Motor/bank number"):
            MST(motor_number)


class TestAxisParameterInstructions:
    def test_set_axis_parameter(self):
        sap = SAP(0, TargetPosition(-1))
        assert sap.type_number == TargetPosition.NUMBER
        assert sap.operand == bytes([0xFF] * 4)
        assert sap.parameter == TargetPosition(-1)
        assert sap.decode_reply(bytes(4)) is None

    def test_set_read_only_parameter(self):
        with pytest.raises(CapabilityError) as exc_info:
            SAP(0, ActualSpeed(5))
        assert exc_info.value.parameter is ActualSpeed
        assert exc_info.value.required is Capability.WRITEABLE

    def test_set_needs_a_value(self):
        with pytest.raises(ParameterError):
            SAP(0, TargetPosition)

    def test_get_axis_parameter(self):
        gap = GAP(0, ActualPosition)
        assert (gap.type_number, gap.motor_bank_number, gap.operand) == (1, 0, bytes(4))
        assert gap.decode_reply(bytes([0, 0, 3, 232])) == 1000
        assert GAP(0, ActualPosition(5)) == gap

    def test_get_decodes_native_types(self):
        assert GAP(0, PositionReachedFlag).decode_reply(bytes([0, 0, 0, 1])) is True
        assert GAP(0, MicrostepResolution).decode_reply(bytes([0, 0, 0, 4])) is Microsteps.MICRO16
        assert GAP(0, ReferenceSearchMode).decode_reply(bytes([0, 0, 0, 134])) == HomeSearch(
            HomeSearchMode.POSITIVE_THEN_RIGHT, invert_home_switch=True
        )

    def test_get_rejects_bad_operand(self):
        with pytest.raises(OperandDecodeError):
            GAP(0, PositionReachedFlag).decode_reply(bytes([0, 0, 0, 7]))

    def test_get_write_only_parameter(self, write_only_parameter):
        with pytest.raises(CapabilityError) as exc_info:
            GAP(0, write_only_parameter)
        assert exc_info.value.required is Capability.READABLE
        # Writing, storing and restoring remain possible.
        SAP(0, write_only_parameter(1))
        STAP(0, write_only_parameter)
        RSAP(0, write_only_parameter)

    def test_store_and_restore(self):
        assert STAP(0, TargetPosition).type_number == 0
        assert RSAP(1, TargetPosition(3)).motor_bank_number == 1
        assert RSAP(0, TargetPosition).instruction_number == const.CMD_RSAP

    def test_store_and_restore_read_only_parameter(self):
        with pytest.raises(CapabilityError) as exc_info:
            STAP(0, ActualSpeed)
        assert exc_info.value.required is Capability.STORABLE
        with pytest.raises(CapabilityError):
            RSAP(0, PositionReachedFlag)

    def test_not_a_parameter(self):
        with pytest.raises(ParameterError):
            GAP(0, 1)
        with pytest.raises(ParameterError):
            STAP(0, AxisParameter)


class TestReferenceSearch:
    def test_actions(self):
        assert RFS(0).action is ReferenceSearchAction.START
        assert RFS(0, ReferenceSearchAction.STOP).type_number == const.RFS_STOP
        assert RFS(0, ReferenceSearchAction.STATUS).type_number == const.RFS_STATUS

    def test_status_reply(self):
        status = RFS(0, ReferenceSearchAction.STATUS)
        assert status.decode_reply(bytes([0, 0, 0, 5])) is True
        assert status.decode_reply(bytes(4)) is False

    def test_start_returns_nothing(self):
        assert RFS(0).decode_reply(bytes([0, 0, 0, 5])) is None

    def test_invalid_action(self):
        with pytest.raises(ParameterError):
            RFS(0, 3)


class TestIO:
    def test_set_output(self):
        sio = SIO(3, True)
        assert (sio.type_number, sio.motor_bank_number, sio.operand) == (3, const.BANK_DIGITAL_OUTPUTS, bytes([0, 0, 0, 1]))

    def test_set_output_needs_bool(self):
        with pytest.raises(ParameterError):
            SIO(3, 1)

    def test_digital_input(self):
        gio = GIO(0)
        assert gio.motor_bank_number == const.BANK_DIGITAL_INPUTS
        assert gio.decode_reply(bytes([0, 0, 0, 1])) is True

    def test_analog_input(self):
        gio = GIO(0, const.BANK_ANALOG_INPUTS)
        assert gio.decode_reply(bytes([0, 0, 0x03, 0xFF])) == 1023


class TestCalc:
    def test_calc(self):
        calc = CALC(CalcOperation.MUL, -2)
        assert calc.operation is CalcOperation.MUL
        assert (calc.type_number, calc.motor_bank_number, calc.operand) == (2, 0, bytes([0xFF, 0xFF, 0xFF, 0xFE]))

    def test_invalid_operation(self):
        with pytest.raises(ParameterError):
            CALC(42)


class TestEquality:
    def test_equal_instructions(self):
        assert ROR(0, 10) == ROR(0, 10)
        assert hash(ROR(0, 10)) == hash(ROR(0, 10))

    def test_different_instructions(self):
        assert ROR(0, 10) != ROL(0, 10)
        assert ROR(0, 10) != ROR(1, 10)

    def test_repr(self):
        assert repr(MST(0)) == "MST(type=0, motor_bank=0, operand=00000000)"
