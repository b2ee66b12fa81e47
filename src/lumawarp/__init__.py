from .filters import FILTER_NAMES, FilterEngine, apply_filter, color_noise, glitch, grayscale, resolve_filter, solar_rays, wave_distortion
from .pixel_buffer import SENTINEL_COLOR, PixelBuffer
from .tools.image_tools import load_image, save_image

"""
LumaWarp - Pixel Distortion Filters

Loads an image into an RGBA8 pixel buffer, applies one of five distortion
filters (solar rays, waves, color noise, glitch, grayscale) and writes it back.
"""

__version__ = "0.1.0"

__all__ = [
	"FILTER_NAMES",
	"FilterEngine",
	"PixelBuffer",
	"SENTINEL_COLOR",
	"apply_filter",
	"color_noise",
	"glitch",
	"grayscale",
	"load_image",
	"resolve_filter",
	"save_image",
	"solar_rays",
	"wave_distortion",
]
