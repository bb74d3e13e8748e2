import json
from pathlib import Path

import pytest

from ts_schema_to_ir.pipeline import MixedLiteralKinds
from ts_schema_to_ir.pipeline.analyzer import LiteralCollapser, LiteralSet, PrimitiveKind
from ts_schema_to_ir.pipeline.analyzer.ir_nodes import literal_kind_of


def load_test_data():
    """Load test cases from JSON file"""
    test_data_path = Path(__file__).parent / "test_data" / "literal_collapse_tests.json"
    with open(test_data_path) as f:
        return json.load(f)


@pytest.mark.parametrize("test_case", load_test_data(), ids=lambda tc: tc["name"])
def test_collapse(test_case):
    """Test collapsing literal unions into literal sets"""
    collapser = LiteralCollapser()

    if "error" in test_case:
        with pytest.raises(MixedLiteralKinds) as exc_info:
            collapser.collapse(test_case["values"], "Event.data.x")
        assert exc_info.value.location == "Event.data.x"
        return

    literal_set = collapser.collapse(test_case["values"], "Event.data.x")
    assert isinstance(literal_set, LiteralSet)
    assert literal_set.primitive_kind == PrimitiveKind(test_case["expected_kind"])
    assert literal_set.values == test_case["expected_values"]


class TestLiteralCollapser:
    """Test cases for kind inference"""

    def test_numeric_values_widen_to_float(self):
        assert LiteralCollapser.infer_kind([1, 2, 3.14159], "x") == PrimitiveKind.FLOAT

    def test_integral_float_is_integer(self):
        assert literal_kind_of(2.0) == PrimitiveKind.INTEGER
        assert literal_kind_of(2.5) == PrimitiveKind.FLOAT
        assert LiteralCollapser.infer_kind([1, 2.0], "x") == PrimitiveKind.INTEGER
        assert LiteralCollapser().collapse([2.0, 2], "x").values == [2]

    def test_bool_is_not_numeric(self):
        with pytest.raises(MixedLiteralKinds) as exc_info:
            LiteralCollapser.infer_kind([0, False], "x")
        assert exc_info.value.kinds == ["integer", "boolean"]

    def test_non_literal_value(self):
        with pytest.raises(MixedLiteralKinds):
            LiteralCollapser.infer_kind([None], "x")

    def test_error_message_names_location(self):
        with pytest.raises(MixedLiteralKinds, match="Event.data.mixed"):
            LiteralCollapser().collapse(["a", 1], "Event.data.mixed")


if __name__ == "__main__":
    pytest.main([__file__])
