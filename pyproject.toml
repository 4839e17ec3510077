[build-system]
requires = ["hatchling"]
build-backend = "hatchling.build"

[project]
name = "sensor-samples"
version = "1.0.0"
description = "Timestamped sensor sample types for robotics: camera frames, sonar data, bounding boxes, inertial readings and rigid body states"
requires-python = ">=3.10"
dependencies = [
    "numpy",
]
keywords = ["robotics", "sensors", "sonar", "camera", "imu", "rigid body", "bounding box"]
classifiers = [
    "Development Status :: 4 - Beta",
    "Intended Audience :: Science/Research",
    "Intended Audience :: Developers",
    "Programming Language :: Python :: 3",
    "Programming Language :: Python :: 3 :: Only",
    "Programming Language :: Python :: 3.10",
    "Programming Language :: Python :: 3.11",
    "Programming Language :: Python :: 3.12",
    "Programming Language :: Python :: 3.13",
    "Operating System :: OS Independent",
    "Topic :: Scientific/Engineering",
]

[project.optional-dependencies]
test = [
    "pytest",
]

[tool.hatch.build.targets.wheel]
packages = ["sensor_samples"]

[tool.pytest.ini_options]
addopts = "-ra"
