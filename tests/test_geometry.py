import subprocess

import pytest

from termviz import geometry
from termviz.geometry import GeometryError, TputGeometry, resolve_geometry

from conftest import FixedGeometry


def test_image_fitting_terminal_keeps_intrinsic_width_and_halves_height() -> None:
    provider = FixedGeometry(rows=40, columns=120)
    assert resolve_geometry(100, 60, provider=provider) == (100, 30)


def test_image_exactly_filling_terminal_is_not_scaled() -> None:
    # 2 * 20 - 1 = 39 pixel rows available
    provider = FixedGeometry(rows=20, columns=50)
    assert resolve_geometry(50, 39, provider=provider) == (50, 19)


def test_wide_image_is_scaled_down_to_terminal_width() -> None:
    provider = FixedGeometry(rows=100, columns=80)
    # scale = min(80/160, 199/100) = 0.5
    assert resolve_geometry(160, 100, provider=provider) == (80, 25)


def test_tall_image_is_scaled_down_to_terminal_height() -> None:
    provider = FixedGeometry(rows=25, columns=200)
    # th = 49, scale = min(200/100, 49/98) = 0.5
    assert resolve_geometry(100, 98, provider=provider) == (50, 24)


def test_user_width_bypasses_terminal_query() -> None:
    provider = FixedGeometry(rows=1, columns=1)
    assert resolve_geometry(10, 10, user_width=4, provider=provider) == (4, 2)
    assert provider.queries == []


def test_user_width_can_upscale() -> None:
    assert resolve_geometry(10, 7, user_width=30) == (30, 10)


def test_looping_animation_uses_fixed_column_count() -> None:
    provider = FixedGeometry(rows=100, columns=500)
    # 40 columns regardless of the real terminal width
    assert resolve_geometry(80, 20, provider=provider, query_columns=False) == (40, 5)
    assert provider.queries == ['rows']


def test_degenerate_geometry_is_allowed() -> None:
    provider = FixedGeometry(rows=1, columns=100)
    # th = 1, scale = 1/100 -> height rounds to 0
    assert resolve_geometry(100, 100, provider=provider) == (1, 0)


def test_geometry_errors_propagate() -> None:
    class BrokenGeometry(FixedGeometry):
        def rows(self):
            raise GeometryError("couldn't determine lines: boom")

    with pytest.raises(GeometryError, match="lines"):
        resolve_geometry(10, 10, provider=BrokenGeometry())


def _fake_run(stdout):
    def run(args, **kwargs):
        return subprocess.CompletedProcess(args, 0, stdout=stdout, stderr='')
    return run


def test_tput_geometry_parses_single_integer(monkeypatch) -> None:
    calls = []

    def run(args, **kwargs):
        calls.append(args)
        return subprocess.CompletedProcess(args, 0, stdout='42\n', stderr='')

    monkeypatch.setattr(geometry.subprocess, 'run', run)
    provider = TputGeometry()
    assert provider.rows() == 42
    assert provider.columns() == 42
    assert calls == [['tput', 'lines'], ['tput', 'cols']]


def test_tput_geometry_rejects_multiline_output(monkeypatch) -> None:
    monkeypatch.setattr(geometry.subprocess, 'run', _fake_run('24\n80\n'))
    with pytest.raises(GeometryError, match="unexpected output when determining lines"):
        TputGeometry().rows()


def test_tput_geometry_rejects_empty_output(monkeypatch) -> None:
    monkeypatch.setattr(geometry.subprocess, 'run', _fake_run(''))
    with pytest.raises(GeometryError, match="cols"):
        TputGeometry().columns()


def test_tput_geometry_rejects_non_integer_output(monkeypatch) -> None:
    monkeypatch.setattr(geometry.subprocess, 'run', _fake_run('eighty\n'))
    with pytest.raises(GeometryError, match="couldn't parse cols"):
        TputGeometry().columns()


def test_tput_geometry_wraps_process_failures(monkeypatch) -> None:
    def run(args, **kwargs):
        raise subprocess.CalledProcessError(1, args)

    monkeypatch.setattr(geometry.subprocess, 'run', run)
    with pytest.raises(GeometryError, match="couldn't determine lines") as excinfo:
        TputGeometry().rows()
    assert isinstance(excinfo.value.__cause__, subprocess.CalledProcessError)


def test_tput_geometry_wraps_missing_binary(monkeypatch) -> None:
    def run(args, **kwargs):
        raise FileNotFoundError(2, 'No such file or directory', args[0])

    monkeypatch.setattr(geometry.subprocess, 'run', run)
    with pytest.raises(GeometryError, match="couldn't determine cols"):
        TputGeometry().columns()


def test_zero_size_image_is_rejected() -> None:
    with pytest.raises(ValueError, match="zero size"):
        resolve_geometry(0, 0, user_width=4)
    with pytest.raises(ValueError, match="zero size"):
        resolve_geometry(5, 0, provider=FixedGeometry())
