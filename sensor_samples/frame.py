"""Container for a single camera image and its metadata."""

from __future__ import annotations

import enum
import re
from dataclasses import dataclass, field
from datetime import datetime, timezone

EPOCH = datetime(1970, 1, 1, tzinfo=timezone.utc)


class FrameMode(enum.IntEnum):
    """Colour space / encoding of the image bytes."""

    UNDEFINED = 0
    GRAYSCALE = 1
    RGB = 2
    UYVY = 3
    BGR = 4
    RGB32 = 5
    BAYER = 128
    RAW_MODES = 128
    BAYER_RGGB = 129
    BAYER_GRBG = 130
    BAYER_BGGR = 131
    BAYER_GBRG = 132
    # A compressed image has no relationship between pixel and byte counts.
    COMPRESSED_MODES = 256
    PJPG = 257
    JPEG = 258
    PNG = 259


class FrameStatus(enum.Enum):
    """Status flag of a frame."""

    EMPTY = 0
    VALID = 1
    INVALID = 2


@dataclass(frozen=True)
class FrameSize:
    """Image size in pixels."""

    width: int = 0
    height: int = 0


_CHANNELS = {
    FrameMode.UNDEFINED: 0,
    FrameMode.BAYER: 1,
    FrameMode.BAYER_RGGB: 1,
    FrameMode.BAYER_GRBG: 1,
    FrameMode.BAYER_BGGR: 1,
    FrameMode.BAYER_GBRG: 1,
    FrameMode.GRAYSCALE: 1,
    FrameMode.UYVY: 1,
    FrameMode.RGB: 3,
    FrameMode.BGR: 3,
    FrameMode.RGB32: 4,
    FrameMode.PJPG: 1,
    FrameMode.JPEG: 1,
    FrameMode.PNG: 1,
}

_BAYER_MODES = frozenset(
    {
        FrameMode.BAYER,
        FrameMode.BAYER_RGGB,
        FrameMode.BAYER_GRBG,
        FrameMode.BAYER_BGGR,
        FrameMode.BAYER_GBRG,
    }
)

_MODE_NAMES = {
    "MODE_UNDEFINED": FrameMode.UNDEFINED,
    "MODE_GRAYSCALE": FrameMode.GRAYSCALE,
    "MODE_RGB": FrameMode.RGB,
    "MODE_BGR": FrameMode.BGR,
    "MODE_UYVY": FrameMode.UYVY,
    "RAW_MODES": FrameMode.RAW_MODES,
    "MODE_BAYER": FrameMode.BAYER,
    "MODE_BAYER_RGGB": FrameMode.BAYER_RGGB,
    "MODE_BAYER_GRBG": FrameMode.BAYER_GRBG,
    "MODE_BAYER_BGGR": FrameMode.BAYER_BGGR,
    "MODE_BAYER_GBRG": FrameMode.BAYER_GBRG,
    "MODE_RGB32": FrameMode.RGB32,
    "COMPRESSED_MODES": FrameMode.COMPRESSED_MODES,
    "MODE_PJPG": FrameMode.PJPG,
    "MODE_JPEG": FrameMode.JPEG,
    "MODE_PNG": FrameMode.PNG,
}

_SWAPPED_FIELDS = (
    "image",
    "attributes",
    "time",
    "received_time",
    "size",
    "_data_depth",
    "_pixel_size",
    "_row_size",
    "_frame_mode",
    "status",
)

_INT_RE = re.compile(r"\s*[+-]?\d+")
_FLOAT_RE = re.compile(r"\s*[+-]?(?:\d+\.?\d*|\.\d+)(?:[eE][+-]?\d+)?")


def _to_text(value: object) -> str:
    if isinstance(value, bool):
        return "1" if value else "0"
    if isinstance(value, float):
        return format(value, "g")
    return str(value)


def _from_text(text: str, kind: type):
    if kind is str:
        tokens = text.split()
        return tokens[0] if tokens else ""
    if kind is bool:
        match = _INT_RE.match(text)
        return bool(match) and int(match.group()) == 1
    if kind is int:
        match = _INT_RE.match(text)
        return int(match.group()) if match else 0
    if kind is float:
        match = _FLOAT_RE.match(text)
        return float(match.group()) if match else 0.0
    raise TypeError(f"unsupported attribute type: {kind!r}")


def _resize(buffer: bytearray, size: int) -> None:
    if size < len(buffer):
        del buffer[size:]
    else:
        buffer.extend(bytes(size - len(buffer)))


class Frame:
    """A single image frame: raw bytes plus size, mode, depth and attributes."""

    def __init__(
        self,
        width: int = 0,
        height: int = 0,
        depth: int | None = None,
        mode: FrameMode | int | None = None,
        val: int = 0,
        size_in_bytes: int = 0,
    ) -> None:
        self.time: datetime = EPOCH
        self.received_time: datetime = EPOCH
        self.image = bytearray()
        self.attributes: dict[str, str] = {}
        self.size = FrameSize()
        self._data_depth = 0
        self._pixel_size = 0
        self._row_size = 0
        self._frame_mode = FrameMode.UNDEFINED
        self.status = FrameStatus.EMPTY
        if depth is None and mode is None and width == 0 and height == 0:
            self.reset()
            return
        self.init(
            width,
            height,
            8 if depth is None else depth,
            FrameMode.GRAYSCALE if mode is None else mode,
            val,
            size_in_bytes,
        )

    @classmethod
    def from_frame(cls, other: Frame, bcopy: bool = True) -> Frame:
        """Build a frame with the metadata (and, if bcopy, the data) of another."""
        frame = cls()
        frame.init_from(other, bcopy)
        return frame

    def copy_image_independent_attributes(self, other: Frame) -> None:
        """Copy attributes, timestamps and status; existing attributes are overwritten."""
        for name, data in other.attributes.items():
            self.attributes[name] = data
        self.time = other.time
        self.received_time = other.received_time
        self.status = other.status

    def init(
        self,
        width: int,
        height: int,
        depth: int = 8,
        mode: FrameMode | int = FrameMode.GRAYSCALE,
        val: int = 0,
        size_in_bytes: int = 0,
    ) -> None:
        """(Re)initialize the image layout and fill its bytes with val (if val >= 0)."""
        mode = FrameMode(mode)
        if (
            self.size.height != height
            or self.size.width != width
            or self._frame_mode != mode
            or self._data_depth != depth
            or (size_in_bytes != 0 and size_in_bytes != len(self.image))
        ):
            if depth == 0 and (height != 0 or width != 0):
                raise ValueError("cannot initialize frame with depth = 0")
            self._frame_mode = mode
            self.size = FrameSize(width, height)
            self.data_depth = depth
        if not size_in_bytes:
            size_in_bytes = self._pixel_size * self.pixel_count
        self.validate_image_size(size_in_bytes)
        _resize(self.image, size_in_bytes)
        self.reset(val)

    def init_from(self, other: Frame, bcopy: bool = True) -> None:
        """Copy the layout and attributes of another frame, and its data if bcopy."""
        self.init(
            other.width,
            other.height,
            other.data_depth,
            other.frame_mode,
            -1,
            other.number_of_bytes,
        )
        if bcopy:
            self.set_image(other.image)
        self.copy_image_independent_attributes(other)

    def reset(self, val: int = 0) -> None:
        """Clear time, status and attributes; fill bytes with val unless negative."""
        self.time = EPOCH
        if self.image and val >= 0:
            self.image[:] = bytes([val % 256]) * len(self.image)
        self.status = FrameStatus.EMPTY
        self.attributes.clear()

    def swap(self, other: Frame) -> None:
        """Exchange all content with another frame."""
        for name in _SWAPPED_FIELDS:
            mine = getattr(self, name)
            setattr(self, name, getattr(other, name))
            setattr(other, name, mine)

    def is_hdr(self) -> bool:
        return self.has_attribute("hdr") and self.get_attribute("hdr", bool)

    def set_hdr(self, value: bool = True) -> None:
        """Mark the frame as HDR; the flag is always stored as set."""
        self.set_attribute("hdr", True)

    def is_compressed(self) -> bool:
        return self._frame_mode >= FrameMode.COMPRESSED_MODES

    def is_grayscale(self) -> bool:
        return self._frame_mode == FrameMode.GRAYSCALE

    def is_rgb(self) -> bool:
        return self._frame_mode == FrameMode.RGB

    def is_bayer(self) -> bool:
        return self._frame_mode in _BAYER_MODES

    def channel_count(self) -> int:
        return self.channel_count_for(self._frame_mode)

    @staticmethod
    def channel_count_for(mode: FrameMode | int) -> int:
        """Number of channels of a mode; raises ValueError for unknown modes."""
        try:
            return _CHANNELS[FrameMode(mode)]
        except (KeyError, ValueError):
            raise ValueError(f"unknown frame mode: {mode!r}") from None

    @staticmethod
    def to_frame_mode(name: str) -> FrameMode:
        """Parse a mode name such as "MODE_RGB"; unknown names give UNDEFINED."""
        return _MODE_NAMES.get(name, FrameMode.UNDEFINED)

    def _update_sizes(self) -> None:
        component_size = (self._data_depth + 7) // 8
        self._pixel_size = self.channel_count_for(self._frame_mode) * component_size
        self._row_size = 0 if self.is_compressed() else self._pixel_size * self.width

    @property
    def data_depth(self) -> int:
        """Effective bits per channel."""
        return self._data_depth

    @data_depth.setter
    def data_depth(self, value: int) -> None:
        self._data_depth = value
        self._update_sizes()

    @property
    def frame_mode(self) -> FrameMode:
        return self._frame_mode

    @frame_mode.setter
    def frame_mode(self, mode: FrameMode | int) -> None:
        self._frame_mode = FrameMode(mode)
        self._update_sizes()

    @property
    def pixel_size(self) -> int:
        """Size of one pixel in bytes."""
        return self._pixel_size

    @property
    def row_size(self) -> int:
        """Size of one row in bytes; compressed images have none."""
        if self.is_compressed():
            raise ValueError("there is no row size for a compressed image")
        return self._row_size

    @property
    def number_of_bytes(self) -> int:
        return len(self.image)

    @property
    def pixel_count(self) -> int:
        return self.size.width * self.size.height

    @property
    def width(self) -> int:
        return self.size.width

    @property
    def height(self) -> int:
        return self.size.height

    def validate_image_size(self, size: int) -> None:
        """Raise ValueError if size does not fit an uncompressed image."""
        expected = self._pixel_size * self.pixel_count
        if not self.is_compressed() and size != expected:
            raise ValueError(
                f"wrong image size: got {size} bytes, expected {expected} bytes"
            )

    def set_image(self, data: bytes | bytearray | memoryview) -> None:
        """Replace the image bytes after checking their length."""
        data = bytes(data)
        self.validate_image_size(len(data))
        self.image = bytearray(data)

    def has_attribute(self, name: str) -> bool:
        return name in self.attributes

    def get_attribute(self, name: str, kind: type = str):
        """Read an attribute as kind (str, int, float or bool); missing gives kind()."""
        if kind not in (str, int, float, bool):
            raise TypeError(f"unsupported attribute type: {kind!r}")
        data = self.attributes.get(name)
        if data is None:
            return kind()
        return _from_text(data, kind)

    def set_attribute(self, name: str, value: object) -> None:
        self.attributes[name] = _to_text(value)

    def delete_attribute(self, name: str) -> bool:
        """Remove an attribute; return whether it existed."""
        return self.attributes.pop(name, None) is not None

    def at(self, column: int, row: int) -> memoryview:
        """Writable view of the bytes of one pixel."""
        if column >= self.size.width or row >= self.size.height or column < 0 or row < 0:
            raise IndexError("out of index")
        offset = row * self.row_size + column * self._pixel_size
        return memoryview(self.image)[offset : offset + self._pixel_size]


@dataclass
class FramePair:
    """Two frames taken together, e.g. from a stereo camera."""

    time: datetime = EPOCH
    first: Frame = field(default_factory=Frame)
    second: Frame = field(default_factory=Frame)
    id: int = 0