import math
from typing import Callable, Dict, Optional, Tuple, Union

import numpy

from lumawarp.filters_cpu import GLITCH_ROW_STRIDE, color_noise_kernel, glitch_kernel, grayscale_kernel, solar_rays_kernel, wave_distortion_kernel
from lumawarp.pixel_buffer import PixelBuffer

"""
Filter Engine - Public API

Five independent in-place transforms over a PixelBuffer, plus the numbered
registry the command line selects from.
"""

DEFAULT_AMPLITUDE = 10.0
DEFAULT_INTENSITY = 0.5

NOISE_RANGE = 250
NOISE_SCALE = 3.5
GLITCH_MAX_SHIFT = 20

# Menu numbering: 1-5, in this order
FILTER_NAMES: Tuple[str, ...] = (
	'solar_rays',
	'wave_distortion',
	'color_noise',
	'glitch',
	'grayscale',
)

FILTER_TITLES = {
	'solar_rays': 'Solar rays',
	'wave_distortion': 'Waves',
	'color_noise': 'Color noise',
	'glitch': 'Glitch',
	'grayscale': 'Grayscale',
}

_default_rng: Optional[numpy.random.Generator] = None

def default_rng() -> numpy.random.Generator:
	"""
	Process-wide generator used when a caller passes no rng.

	Seeded once from OS entropy on first use. Shared by every call that omits
	rng, so results depend on call order, and it is not safe to share across
	threads. Pass an explicit Generator for reproducible output.
	"""
	global _default_rng
	if _default_rng is None:
		_default_rng = numpy.random.default_rng()
	return _default_rng

def _require_finite(name: str, value: float) -> float:
	value = float(value)
	if not math.isfinite(value):
		raise ValueError(f"{name} must be a finite number, got {value}")
	return value

def solar_rays(buffer: PixelBuffer) -> None:
	"""
	Brighten the image with light rays radiating from its center.

	The boost is ``max(0, sin(10 * angle) * (1 - dist / max_dist)) * 100``,
	added to R, G and B and saturated at 255. Alpha is left untouched.
	"""
	solar_rays_kernel(buffer.data)

def wave_distortion(buffer: PixelBuffer, amplitude: float = DEFAULT_AMPLITUDE) -> None:
	"""
	Displace pixels along sine/cosine waves with a period of 128 pixels.

	Destination (x, y) samples the pre-filter image at
	``(x + int(a * sin(2 pi y / 128)), y + int(a * cos(2 pi x / 128)))``.
	Samples falling outside the image read as opaque black.

	Parameters
	----------
	buffer : PixelBuffer
		Image to distort in place

	amplitude : float, default=10.0
		Maximum displacement in pixels. 0.0 leaves the image unchanged.
	"""
	amplitude = _require_finite('amplitude', amplitude)

	source = buffer.snapshot()
	wave_distortion_kernel(source.data, buffer.data, amplitude)

def color_noise(buffer: PixelBuffer, intensity: float = DEFAULT_INTENSITY, rng: Optional[numpy.random.Generator] = None) -> None:
	"""
	Add independent uniform noise to each color channel.

	Each of R, G, B receives ``int(draw * intensity * 3.5)`` with ``draw``
	uniform over [-250, 250], then is clamped to [0, 255]. Even moderate
	intensities saturate most channels; this matches the established look of
	the effect.

	Parameters
	----------
	buffer : PixelBuffer
		Image to modify in place

	intensity : float, default=0.5
		Noise strength. 0.0 leaves the image unchanged, although draws are
		still consumed from rng.

	rng : numpy.random.Generator, optional
		Source of the draws. Defaults to the process-wide generator.
	"""
	intensity = _require_finite('intensity', intensity)
	rng = rng if rng is not None else default_rng()

	draws = rng.integers(-NOISE_RANGE, NOISE_RANGE, size=(buffer.height, buffer.width, 3), endpoint=True)
	color_noise_kernel(buffer.data, draws, intensity * NOISE_SCALE)

def glitch(buffer: PixelBuffer, rng: Optional[numpy.random.Generator] = None) -> None:
	"""
	Shift every tenth row sideways by a random 0-20 pixels, wrapping around.

	Rows with ``y % 20 == 0`` also get +50 red, other shifted rows with
	``y % 15 == 0`` get +50 green. Each shifted row is a rotation of its
	original content, so no pixel is lost or duplicated.

	Parameters
	----------
	buffer : PixelBuffer
		Image to modify in place

	rng : numpy.random.Generator, optional
		Source of the per-row shifts. Defaults to the process-wide generator.
	"""
	rng = rng if rng is not None else default_rng()

	n_rows = (buffer.height + GLITCH_ROW_STRIDE - 1) // GLITCH_ROW_STRIDE
	shifts = rng.integers(0, GLITCH_MAX_SHIFT, size=n_rows, endpoint=True)
	glitch_kernel(buffer.data, shifts)

def grayscale(buffer: PixelBuffer) -> None:
	"""Replace R, G and B with the rounded luma 0.299 R + 0.587 G + 0.114 B"""
	grayscale_kernel(buffer.data)

def resolve_filter(filter_id: Union[int, str]) -> str:
	"""
	Map a menu number (1-5) or a filter name to the canonical filter name.

	Raises ValueError for anything else.
	"""
	if isinstance(filter_id, str):
		key = filter_id.strip().lower().replace('-', '_')
		if key.isdigit():
			return resolve_filter(int(key))
		if key in FILTER_NAMES:
			return key
		raise ValueError(f"Unknown filter: {filter_id!r}. Must be 1-5 or one of {', '.join(FILTER_NAMES)}")

	if isinstance(filter_id, bool) or not isinstance(filter_id, int):
		raise ValueError(f"Invalid filter identifier: {filter_id!r}")
	if not 1 <= filter_id <= len(FILTER_NAMES):
		raise ValueError(f"Invalid filter number: {filter_id}. Must be between 1 and {len(FILTER_NAMES)}")

	return FILTER_NAMES[filter_id - 1]

class FilterEngine:
	"""
	Applies one selected filter at a time with fixed parameters.

	Owns its random generator, so two engines built with the same seed
	produce identical noise and glitch output for identical input.

	Parameters
	----------
	amplitude : float, default=10.0
		Wave distortion amplitude in pixels

	intensity : float, default=0.5
		Color noise intensity

	seed : int, optional
		Seed for the engine's generator. None seeds from OS entropy.

	Examples
	--------
	>>> engine = FilterEngine(seed=2016)
	>>> buffer = load_image("input.png")
	>>> engine.apply(buffer, 4)
	>>> save_image(buffer, "output.png")
	"""

	def __init__(
		self,
		amplitude: float = DEFAULT_AMPLITUDE,
		intensity: float = DEFAULT_INTENSITY,
		seed: Optional[int] = None
	):
		self.amplitude = _require_finite('amplitude', amplitude)
		self.intensity = _require_finite('intensity', intensity)
		self.seed = seed
		self.rng = numpy.random.default_rng(seed)

		self._filters: Dict[str, Callable[[PixelBuffer], None]] = {
			'solar_rays': solar_rays,
			'wave_distortion': lambda buffer: wave_distortion(buffer, self.amplitude),
			'color_noise': lambda buffer: color_noise(buffer, self.intensity, self.rng),
			'glitch': lambda buffer: glitch(buffer, self.rng),
			'grayscale': grayscale,
		}

	def apply(self, buffer: PixelBuffer, filter_id: Union[int, str]) -> str:
		"""
		Run exactly one filter on buffer in place.

		Parameters
		----------
		buffer : PixelBuffer
			Image to modify

		filter_id : int or str
			Menu number 1-5 or filter name

		Returns
		-------
		str
			Canonical name of the filter that ran
		"""
		name = resolve_filter(filter_id)
		self._filters[name](buffer)
		return name

def apply_filter(
	buffer: PixelBuffer,
	filter_id: Union[int, str],
	amplitude: float = DEFAULT_AMPLITUDE,
	intensity: float = DEFAULT_INTENSITY,
	rng: Optional[numpy.random.Generator] = None
) -> str:
	"""
	Quick function to apply one filter by number or name.

	This is a convenience wrapper for one-off usage. Randomised filters fall
	back to the process-wide generator when rng is None.
	"""
	name = resolve_filter(filter_id)

	if name == 'solar_rays':
		solar_rays(buffer)
	elif name == 'wave_distortion':
		wave_distortion(buffer, amplitude)
	elif name == 'color_noise':
		color_noise(buffer, intensity, rng)
	elif name == 'glitch':
		glitch(buffer, rng)
	else:
		grayscale(buffer)

	return name
