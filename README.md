# sensor-samples

Data types for timestamped sensor readings as used on mobile robots, built on
NumPy. Timestamps are timezone-aware `datetime` values (the Unix epoch stands
for "not set"), durations are `timedelta`, angles are radians and quaternions
are `(w, x, y, z)` arrays.

## Modules

- `sensor_samples.frame`: camera images. `Frame` holds the raw bytes together
  with size (`FrameSize`), pixel mode (`FrameMode`), bit depth, status
  (`FrameStatus`) and string attributes. It checks image sizes against the
  layout, computes pixel and row sizes, parses mode names with
  `Frame.to_frame_mode` and gives a writable view of one pixel with `at`.
  `FramePair` bundles two frames.
- `sensor_samples.sonar_beam`: `SonarBeam`, the byte-valued echo bins along one
  bearing, with its `spatial_resolution`.
- `sensor_samples.sonar_scan`: `SonarScan`, several beams stored as a byte
  image. Beams are found by bearing (`beam_index_for_bearing`,
  `has_sonar_beam`), added and read back (`add_sonar_beam`,
  `get_sonar_beam`), and the storage switches between one beam per column and
  one beam per row with `toggle_memory_layout`.
- `sensor_samples.sonar`: `Sonar`, the general sample for scanning and
  multibeam sonars with normalized float bins. It builds beam by beam
  (`push_beam`, `set_beam`), gives bin times and distances, checks its own
  consistency (`validate`) and converts from and to `SonarBeam` and
  `SonarScan` (`from_sonar_beam`, `from_sonar_scan`, `to_sonar_beam`,
  `to_sonar_scan`).
- `sensor_samples.bounding_box`: axis-aligned `BoundingBox` and
  `OrientedBoundingBox`, with checks that values and covariances are finite.
- `sensor_samples.events`: event-camera samples, `Event` and `EventArray`.
- `sensor_samples.inertial`: raw IMU readings (`IMUSensors`) and
  `RigidBodyAcceleration`.
- `sensor_samples.rigid_body_state`: `RigidBodyState` with pose, velocities and
  covariances, validity checks, Euler angles and rates, and the functions
  `angular_velocity_to_euler_rate` and `euler_rate_to_angular_velocity`.

Missing values follow one convention: NaN marks an invalid value and infinity
marks an unknown covariance.

## Installation

```
pip install .
```

To run the tests:

```
pip install .[test]
pytest
```

## Examples

```python
from sensor_samples.frame import Frame, FrameMode

frame = Frame(640, 480, 8, FrameMode.RGB)
assert frame.number_of_bytes == 640 * 480 * 3
frame.set_attribute("exposure", 12)
assert frame.get_attribute("exposure", int) == 12
```

```python
from datetime import timedelta

from sensor_samples.frame import EPOCH
from sensor_samples.sonar import Sonar

sonar = Sonar.from_single_beam(
    EPOCH, timedelta(microseconds=100), 0.1, 0.05, [0.2, 0.4, 0.8], 0.0
)
beam = sonar.to_sonar_beam()
assert list(beam.beam) == [51, 102, 204]
```

```python
from sensor_samples.rigid_body_state import RigidBodyState

state = RigidBodyState.unknown()
assert state.has_valid_position()
assert state.has_valid_orientation()
assert not state.is_known_value(state.cov_position)
```

## What the package does not do

It has no depth-map type and does not turn range data into point clouds. It
holds samples and checks them; it does not read them from devices, store them
on disk or send them anywhere, and it has no command-line program.