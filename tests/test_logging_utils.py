import logging

import numpy as np

from angle_solver.logging_utils import _safe_repr, apply_debug_logging, debug_log_call
from angle_solver.model import Angle, Line, Point


def test_safe_repr_summarizes_records_and_arrays():
    assert _safe_repr(Angle("B", ("A", "C"), value=50, label="α")) == "∠ABC=50 [α]"
    assert _safe_repr(Angle("B", ("A", "C"))) == "∠ABC=?"
    assert _safe_repr(Point("A", 1.5, 2)) == "A(1.5, 2)"
    assert _safe_repr(Line("l", ["A", "D", "B"])) == "line l:ADB"
    assert _safe_repr(np.zeros((2, 3))).startswith("ndarray(shape=(2, 3), dtype=float64)")
    assert _safe_repr(list(range(8))) == "[0, 1, 2, 3, 4, ... (8 items)]"


def test_debug_log_call_traces_arguments_and_result(caplog):
    logger = logging.getLogger("angle_solver.tests.trace")

    @debug_log_call(logger)
    def add(a, b=0):
        return a + b

    with caplog.at_level(logging.DEBUG, logger="angle_solver.tests.trace"):
        assert add(1, b=2) == 3
    assert "Entering" in caplog.text
    assert "kwargs={b=2}" in caplog.text
    assert "-> 3" in caplog.text


def test_apply_debug_logging_wraps_module_functions():
    def double(value):
        return value * 2

    namespace = {"__name__": __name__, "double": double, "len": len}
    apply_debug_logging(namespace, logger=logging.getLogger("angle_solver.tests.ns"))
    assert getattr(namespace["double"], "_debug_logging_wrapped", False)
    assert namespace["double"](4) == 8
    assert namespace["len"] is len
