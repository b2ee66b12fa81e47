from typing import Optional, Sequence, Tuple

import numpy

"""
In-memory RGBA8 image representation shared by the filters and the codec
"""

Pixel = Tuple[int, int, int, int]

# Returned for every out-of-bounds read (opaque black)
SENTINEL_COLOR: Pixel = (0, 0, 0, 255)

CHANNELS = 4

class PixelBuffer:
	"""
	Dense RGBA8 pixel buffer with bounds-checked accessors.

	Pixels are stored in a ``numpy.uint8`` array of shape ``(height, width, 4)``.
	Reads outside the image return ``SENTINEL_COLOR`` and writes outside the
	image are ignored, so sampling near the edges never fails.

	Parameters
	----------
	width : int, default=0
		Image width in pixels.

	height : int, default=0
		Image height in pixels.

	Examples
	--------
	>>> buffer = PixelBuffer(2, 2)
	>>> buffer.set_pixel(0, 0, (255, 128, 0, 255))
	>>> buffer.get_pixel(0, 0)
	(255, 128, 0, 255)
	>>> buffer.get_pixel(-1, 0)
	(0, 0, 0, 255)
	"""

	def __init__(self, width: int = 0, height: int = 0):
		if width < 0 or height < 0:
			raise ValueError(f"Buffer dimensions must be non-negative, got {width}x{height}")

		self._data = numpy.zeros((height, width, CHANNELS), dtype=numpy.uint8)

	@classmethod
	def empty(cls) -> 'PixelBuffer':
		"""Return a 0x0 buffer"""
		return cls(0, 0)

	@classmethod
	def from_array(cls, array: numpy.ndarray, copy: bool = True) -> 'PixelBuffer':
		"""
		Build a buffer from an (height, width, 4) uint8 array.

		Parameters
		----------
		array : np.ndarray
			RGBA8 pixel data, rows first.

		copy : bool, default=True
			Copy the array. With False the buffer takes ownership of it.
		"""
		array = numpy.asarray(array)

		if array.ndim != 3 or array.shape[2] != CHANNELS:
			raise ValueError(f"Expected an array of shape (height, width, {CHANNELS}), got {array.shape}")
		if array.dtype != numpy.uint8:
			raise ValueError(f"Expected uint8 pixel data, got {array.dtype}")

		buffer = cls.__new__(cls)
		buffer._data = numpy.array(array, copy=True) if copy else array
		return buffer

	@property
	def width(self) -> int:
		return self._data.shape[1]

	@property
	def height(self) -> int:
		return self._data.shape[0]

	@property
	def size(self) -> Tuple[int, int]:
		"""(width, height), in the same order as PIL.Image.size"""
		return self.width, self.height

	@property
	def data(self) -> numpy.ndarray:
		"""The live (height, width, 4) array. Writes through it must stay in [0, 255]."""
		return self._data

	def in_bounds(self, x: int, y: int) -> bool:
		return 0 <= x < self.width and 0 <= y < self.height

	def get_pixel(self, x: int, y: int) -> Pixel:
		if not self.in_bounds(x, y):
			return SENTINEL_COLOR

		r, g, b, a = self._data[y, x]
		return int(r), int(g), int(b), int(a)

	def set_pixel(self, x: int, y: int, color: Sequence[int]) -> None:
		# No clamping here: callers saturate before writing
		if len(color) != CHANNELS:
			raise ValueError(f"Expected an (R, G, B, A) color, got {tuple(color)}")

		if self.in_bounds(x, y):
			self._data[y, x] = color

	def copy(self) -> 'PixelBuffer':
		"""Deep copy that can be mutated independently"""
		return PixelBuffer.from_array(self._data, copy=True)

	def snapshot(self) -> 'PixelBuffer':
		"""Deep copy whose pixel data is read-only"""
		frozen = numpy.array(self._data, copy=True)
		frozen.flags.writeable = False
		return PixelBuffer.from_array(frozen, copy=False)

	def to_array(self, copy: bool = True) -> numpy.ndarray:
		return numpy.array(self._data, copy=True) if copy else self._data

	def is_empty(self) -> bool:
		return self.width == 0 or self.height == 0

	def __eq__(self, other: object) -> bool:
		if not isinstance(other, PixelBuffer):
			return NotImplemented
		return self._data.shape == other._data.shape and numpy.array_equal(self._data, other._data)

	__hash__ = None

	def __repr__(self) -> str:
		return f"PixelBuffer(width={self.width}, height={self.height})"

def filled(width: int, height: int, color: Optional[Sequence[int]] = None) -> PixelBuffer:
	"""Allocate a buffer with every pixel set to ``color`` (default opaque black)"""
	buffer = PixelBuffer(width, height)
	buffer.data[:, :] = SENTINEL_COLOR if color is None else tuple(color)
	return buffer

if __name__ == '__main__':
	print('__main__ not supported in modules.')
