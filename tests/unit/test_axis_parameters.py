# tests/unit/test_axis_parameters.py
import pytest

from tmcl_modules.axis_parameters import AXIS_PARAMETERS
from tmcl_modules.axis_parameters import ActualPosition
from tmcl_modules.axis_parameters import ActualSpeed
from tmcl_modules.axis_parameters import AxisParameter
from tmcl_modules.axis_parameters import Capability
from tmcl_modules.axis_parameters import HomeSearch
from tmcl_modules.axis_parameters import HomeSearchMode
from tmcl_modules.axis_parameters import LeftLimitSwitchDisable
from tmcl_modules.axis_parameters import LimitSwitchSearch
from tmcl_modules.axis_parameters import MicrostepResolution
from tmcl_modules.axis_parameters import Microsteps
from tmcl_modules.axis_parameters import PositionReachedFlag
from tmcl_modules.axis_parameters import PulseDivisor
from tmcl_modules.axis_parameters import ReferenceSearchMode
from tmcl_modules.axis_parameters import RightLimitSwitchDisable
from tmcl_modules.axis_parameters import SearchMode
from tmcl_modules.axis_parameters import StandbyCurrent
from tmcl_modules.axis_parameters import TargetPosition
from tmcl_modules.axis_parameters import axis_parameter
from tmcl_modules.codec import INT32
from tmcl_modules.exceptions import InvalidEnumerationError
from tmcl_modules.exceptions import ParameterError

CATALOG_NUMBERS = [0, 1, 2, 3, 4, 5, 6, 7, 8, 9, 10, 11, 12, 13, 17, 140, 153, 154, 193, 194, 195, 196, 197, 200, 214]
READ_ONLY = {3, 8, 9, 10, 11, 196, 197}


def _operand(value: int) -> bytes:
    return value.to_bytes(4, "big")


class TestCatalog:
    def test_catalog_numbers(self):
        assert sorted(AXIS_PARAMETERS) == CATALOG_NUMBERS

    def test_lookup_by_number(self):
        assert axis_parameter(1) is ActualPosition
        assert axis_parameter(140) is MicrostepResolution

    def test_lookup_unknown_number(self):
        with pytest.raises(ParameterError, match="Unknown axis parameter"):
            axis_parameter(99)

    @pytest.mark.parametrize("number", CATALOG_NUMBERS)
    def test_capabilities(self, number):
        parameter_cls = AXIS_PARAMETERS[number]
        assert parameter_cls.NUMBER == number
        assert parameter_cls.is_readable()
        assert parameter_cls.is_writeable() == (number not in READ_ONLY)

    def test_writeable_implies_storable(self):
        for parameter_cls in AXIS_PARAMETERS.values():
            if Capability.WRITEABLE in parameter_cls.capabilities():
                assert Capability.STORABLE in parameter_cls.capabilities()

    def test_read_only_capabilities(self):
        assert ActualSpeed.capabilities() == frozenset({Capability.READABLE})


class TestDeclaration:
    def test_duplicate_number_is_rejected(self):
        with pytest.raises(TypeError, match="already used by ActualPosition"):
            class DuplicatePosition(AxisParameter, number=1, codec=INT32, readable=True):
                pass
        assert AXIS_PARAMETERS[1] is ActualPosition

    def test_missing_codec_is_rejected(self):
        with pytest.raises(TypeError, match="must declare a number and a codec"):
            class NoCodec(AxisParameter, number=251):
                pass
        assert 251 not in AXIS_PARAMETERS

    def test_number_out_of_range_is_rejected(self):
        with pytest.raises(TypeError, match="out of range"):
            class TooLarge(AxisParameter, number=256, codec=INT32):
                pass


class TestParameterValues:
    def test_value_and_operand(self):
        parameter = TargetPosition(-1)
        assert parameter.value == -1
        assert parameter.operand() == bytes([0xFF, 0xFF, 0xFF, 0xFF])

    def test_out_of_range_value(self):
        with pytest.raises(ParameterError):
            TargetPosition(2 ** 31)
        with pytest.raises(ParameterError):
            StandbyCurrent(70000)

    def test_boolean_parameter(self):
        assert PositionReachedFlag.from_operand(_operand(1)).value is True
        assert RightLimitSwitchDisable.disabled() == RightLimitSwitchDisable(True)
        assert LeftLimitSwitchDisable.enabled().operand() == bytes(4)

    def test_pulse_divisor_bounds(self):
        assert PulseDivisor(13).operand() == _operand(13)
        with pytest.raises(ParameterError):
            PulseDivisor(14)

    def test_from_operand(self):
        assert ActualPosition.from_operand(bytes([0, 0, 3, 232])) == ActualPosition(1000)

    def test_equality_and_hash(self):
        assert TargetPosition(5) == TargetPosition(5)
        assert TargetPosition(5) != TargetPosition(6)
        assert TargetPosition(5) != ActualPosition(5)
        assert len({TargetPosition(5), TargetPosition(5), ActualPosition(5)}) == 2

    def test_repr(self):
        assert repr(TargetPosition(42)) == "TargetPosition(42)"


class TestMicrosteps:
    def test_microstep_counts(self):
        assert Microsteps.FULL.microsteps == 1
        assert Microsteps.MICRO16.microsteps == 16
        assert Microsteps.MICRO256.microsteps == 256

    def test_from_microsteps(self):
        assert Microsteps.from_microsteps(64) is Microsteps.MICRO64
        with pytest.raises(ParameterError):
            Microsteps.from_microsteps(3)

    def test_microstep_resolution_operand(self):
        assert MicrostepResolution(Microsteps.MICRO16).operand() == _operand(4)
        assert MicrostepResolution.from_operand(_operand(8)).value is Microsteps.MICRO256

    @pytest.mark.parametrize("microsteps", list(Microsteps))
    def test_every_resolution_survives_the_wire(self, microsteps):
        assert MicrostepResolution.from_operand(MicrostepResolution(microsteps).operand()).value is microsteps

    def test_unknown_resolution(self):
        with pytest.raises(InvalidEnumerationError):
            MicrostepResolution.from_operand(_operand(9))


class TestReferenceSearchMode:
    def test_home_search_byte(self):
        value = ReferenceSearchMode.from_operand(_operand(6)).value
        assert value == HomeSearch(HomeSearchMode.POSITIVE_THEN_RIGHT, invert_home_switch=False)
        assert ReferenceSearchMode(value).operand() == _operand(6)

    def test_inverted_home_search_byte(self):
        value = ReferenceSearchMode.from_operand(_operand(134)).value
        assert value == HomeSearch(HomeSearchMode.POSITIVE_THEN_RIGHT, invert_home_switch=True)
        assert ReferenceSearchMode(value).operand() == _operand(134)

    def test_swapped_limit_switch_search(self):
        value = ReferenceSearchMode.from_operand(_operand(65)).value
        assert value == LimitSwitchSearch(SearchMode.LEFT_SWITCH, swap_left_right=True)

    def test_encoding(self):
        assert ReferenceSearchMode(LimitSwitchSearch(SearchMode.LEFT_FROM_BOTH_SIDES)).operand() == _operand(4)
        assert ReferenceSearchMode(LimitSwitchSearch(SearchMode.LEFT_SWITCH, True)).operand() == _operand(65)
        assert ReferenceSearchMode(HomeSearch(HomeSearchMode.NEGATIVE, True)).operand() == _operand(136)

    @pytest.mark.parametrize("byte", [1, 2, 3, 4, 65, 66, 67, 68, 5, 6, 7, 8, 133, 134, 135, 136])
    def test_every_valid_byte_survives_the_wire(self, byte):
        value = ReferenceSearchMode.from_operand(_operand(byte)).value
        assert ReferenceSearchMode(value).operand() == _operand(byte)

    @pytest.mark.parametrize(
        "byte",
        [
            0,  # no mode
            9,  # base out of range
            63,
            1 + 128,  # invert flag on a limit switch mode
            6 + 64,  # swap flag on a home switch mode
            1 + 64 + 128,  # both flags
            256,  # wider than a byte
        ],
    )
    def test_invalid_bytes(self, byte):
        with pytest.raises(InvalidEnumerationError):
            ReferenceSearchMode.from_operand(_operand(byte))

    def test_rejects_mismatched_mode(self):
        with pytest.raises(ParameterError):
            ReferenceSearchMode(LimitSwitchSearch(HomeSearchMode.POSITIVE))
        with pytest.raises(ParameterError):
            ReferenceSearchMode(6)
