import io
import struct

from hypothesis import given, strategies as st

from pdfcore.path import FillMode, PathBuilder


def make(start=(0, 0)):
    out = io.StringIO()
    return out, PathBuilder(out, start)


def test_move_and_line():
    out, path = make()
    path.move_to((1, 2))
    path.line_to((3.5, -4))
    assert out.getvalue() == "1 2 m\n3.5 -4 l\n"
    assert path.current == (3.5, -4.0)


def test_fractional_coordinates():
    out, path = make()
    path.line_to((0.5, -1.5))
    assert out.getvalue() == "0.5 -1.5 l\n"


def test_cubic_uses_v_when_first_control_is_current():
    out, path = make((1, 1))
    path.cubic((1, 1), (2, 3), (4, 5))
    assert out.getvalue() == "2 3 4 5 v\n"
    assert path.current == (4.0, 5.0)


def test_cubic_uses_y_when_second_control_is_current():
    out, path = make((1, 1))
    path.cubic((2, 3), (1, 1), (4, 5))
    assert out.getvalue() == "2 3 4 5 y\n"


def test_cubic_general():
    out, path = make((0, 0))
    path.cubic((1, 2), (3, 4), (5, 6))
    assert out.getvalue() == "1 2 3 4 5 6 c\n"


def test_quadratic_degenerate():
    out, path = make((0, 0))
    path.quadratic((0, 0), (0, 0))
    assert out.getvalue() == "0 0 0 0 0 0 c\n"


def test_quadratic_to_cubic():
    out, path = make((0, 0))
    path.quadratic((3, 3), (6, 0))
    assert out.getvalue() == "2 2 4 2 6 0 c\n"
    assert path.current == (6.0, 0.0)


def test_close_and_fill():
    out, path = make()
    path.close()
    path.fill(FillMode.NON_ZERO)
    path.fill(FillMode.EVEN_ODD)
    assert out.getvalue() == "h\nf\nf*\n"


def _f32(v):
    return struct.unpack("<f", struct.pack("<f", v))[0]


finite_f32 = st.floats(width=32, allow_nan=False, allow_infinity=False)


@given(finite_f32, finite_f32)
def test_coordinates_roundtrip_as_f32(x, y):
    out, path = make()
    path.line_to((x, y))
    fields = out.getvalue().split()
    assert fields[-1] == "l"
    assert _f32(float(fields[0])) == _f32(x)
    assert _f32(float(fields[1])) == _f32(y)
    assert "e" not in fields[0].lower()