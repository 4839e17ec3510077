from datetime import datetime, timezone

import pytest

from sensor_samples.frame import EPOCH
from sensor_samples.sonar_beam import SonarBeam
from sensor_samples.sonar_scan import SonarScan

T1 = datetime(2021, 5, 1, tzinfo=timezone.utc)


def row_scan(beams=4, bins=3):
    return SonarScan(beams, bins, 0.0, 0.25, memory_layout_column=False)


def beam_at(bearing, data, time=T1):
    return SonarBeam(
        time=time,
        bearing=bearing,
        sampling_interval=0.01,
        speed_of_sound=1500.0,
        beamwidth_horizontal=0.2,
        beamwidth_vertical=0.4,
        beam=bytes(data),
    )


def test_default_scan_is_empty():
    scan = SonarScan()
    assert scan.number_of_bytes == 0
    assert scan.bin_count == 0
    assert scan.memory_layout_column is True
    assert scan.polar_coordinates is True
    assert scan.time == EPOCH


def test_init_sizes_data():
    scan = SonarScan(5, 7, 1.0, 0.1)
    assert scan.number_of_bytes == 35
    assert scan.bin_count == 35
    assert all(b == 0 for b in scan.data)


def test_reset_fills_with_value_modulo_256():
    scan = SonarScan(2, 2, 0.0, 0.25)
    scan.time_beams.append(T1)
    scan.reset(257)
    assert scan.data == bytearray([1, 1, 1, 1])
    assert scan.time_beams == []
    scan.data[0] = 9
    scan.reset(-1)
    assert scan.data[0] == 9


def test_end_bearing_from_start_and_resolution():
    scan = row_scan(beams=5)
    assert scan.end_bearing == pytest.approx(scan.start_bearing - 4 * 0.25)


def test_beam_index_for_bearing():
    scan = row_scan()
    assert scan.beam_index_for_bearing(0.0) == 0
    assert scan.beam_index_for_bearing(-0.5) == 2
    assert scan.beam_index_for_bearing(-1.0) == -1
    assert scan.beam_index_for_bearing(-1.0, False) == 4
    assert scan.beam_index_for_bearing(0.5) == -1


def test_add_and_get_round_trip():
    scan = row_scan()
    scan.add_sonar_beam(beam_at(-0.25, [4, 5, 6]))
    beam = scan.get_sonar_beam(-0.25)
    assert beam.beam == bytearray([4, 5, 6])
    assert beam.time == T1
    assert beam.bearing == -0.25
    assert beam.speed_of_sound == 1500.0
    assert beam.beamwidth_vertical == 0.4
    assert scan.spatial_resolution == beam.spatial_resolution


def test_has_sonar_beam_tracks_added_beams():
    scan = row_scan()
    assert scan.has_sonar_beam(-0.5)
    added = beam_at(-0.5, [1, 1, 1])
    scan.add_sonar_beam(added)
    assert scan.has_sonar_beam(added)
    assert not scan.has_sonar_beam(0.0)
    assert not scan.has_sonar_beam(-2.0)


def test_add_resizes_when_allowed():
    scan = row_scan(beams=2)
    scan.add_sonar_beam(beam_at(-1.0, [1, 2, 3]))
    assert scan.number_of_beams == 5
    assert scan.number_of_bytes == scan.bin_count
    assert len(scan.time_beams) == 5


def test_add_errors():
    column = SonarScan(4, 3, 0.0, 0.25)
    with pytest.raises(ValueError):
        column.add_sonar_beam(beam_at(0.0, [1]))
    scan = row_scan()
    with pytest.raises(ValueError):
        scan.add_sonar_beam(beam_at(0.0, [1, 2, 3, 4]))
    with pytest.raises(ValueError):
        scan.add_sonar_beam(beam_at(0.5, [1]))
    with pytest.raises(ValueError):
        scan.add_sonar_beam(beam_at(-2.0, [1]), resize=False)


def test_get_errors():
    with pytest.raises(ValueError):
        SonarScan(4, 3, 0.0, 0.25).get_sonar_beam(0.0)
    with pytest.raises(LookupError):
        row_scan().get_sonar_beam(-3.0)


def test_toggle_memory_layout_transposes():
    scan = SonarScan(2, 3, 0.0, 0.25)
    scan.set_data(bytes(range(6)))
    scan.toggle_memory_layout()
    assert scan.memory_layout_column is False
    assert scan.data == bytearray([0, 2, 4, 1, 3, 5])
    scan.toggle_memory_layout()
    assert scan.memory_layout_column is True
    assert scan.data == bytearray(range(6))


def test_copy_with_and_without_data():
    scan = row_scan()
    scan.add_sonar_beam(beam_at(0.0, [9, 8, 7]))
    scan.time = T1
    full = scan.copy()
    assert full.data == scan.data
    assert full.time_beams == scan.time_beams
    assert full.time == T1
    assert full.speed_of_sound == scan.speed_of_sound
    meta = scan.copy(bcopy=False)
    assert meta.number_of_bytes == scan.number_of_bytes
    assert meta.time_beams == []
    assert meta.sampling_interval == scan.sampling_interval


def test_swap_exchanges_data_and_layout():
    first = row_scan(beams=2, bins=2)
    first.set_data(bytes([1, 2, 3, 4]))
    second = SonarScan(3, 1, 1.0, 0.5)
    first.swap(second)
    assert first.number_of_beams == 3
    assert first.memory_layout_column is True
    assert second.data == bytearray([1, 2, 3, 4])
    assert second.angular_resolution == 0.25