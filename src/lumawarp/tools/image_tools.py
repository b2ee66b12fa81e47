from pathlib import Path
from typing import Optional, Union

import numpy
from PIL import Image

from lumawarp.pixel_buffer import PixelBuffer

"""
Pillow codec adapter: every decoded image is normalised to RGBA8
"""

DEFAULT_JPEG_QUALITY = 98
DEFAULT_PNG_COMPRESS_LEVEL = 6

# Formats Pillow cannot write with an alpha channel
NO_ALPHA_EXTENSIONS = {'.jpg', '.jpeg', '.bmp'}

def get_pil_save_kwargs(output_path: Path) -> dict:
	"""
	Get appropriate save kwargs based on output file format.

	- JPEG: quality=98 (instead of PIL's default 75)
	- PNG: zlib's default level 6, never interlaced

	Args:
		output_path: Path to the output file

	Returns:
		Dictionary of kwargs to pass to PIL Image.save()
	"""
	ext = output_path.suffix.lower()

	if ext in ['.jpg', '.jpeg']:
		return {'quality': DEFAULT_JPEG_QUALITY}
	elif ext == '.png':
		return {'compress_level': DEFAULT_PNG_COMPRESS_LEVEL}
	else:
		return {}

def image_to_buffer(image: Image.Image) -> PixelBuffer:
	"""Convert any PIL mode (palette, L, LA, I;16, RGB, ...) to an RGBA8 buffer"""
	if image.mode != 'RGBA':
		if image.mode.startswith('I') or image.mode == 'F':
			# Wide grayscale: reduce to 8 bits before adding channels
			image = Image.fromarray((numpy.asarray(image, dtype=numpy.float64) / 257.0).clip(0, 255).astype(numpy.uint8))
		image = image.convert('RGBA')

	return PixelBuffer.from_array(numpy.array(image, dtype=numpy.uint8), copy=False)

def buffer_to_image(buffer: PixelBuffer) -> Image.Image:
	return Image.fromarray(buffer.to_array())

def load_image(path: Union[Path, str]) -> PixelBuffer:
	"""
	Decode an image file into an RGBA8 PixelBuffer.

	Raises FileNotFoundError if the file is missing and
	PIL.UnidentifiedImageError / OSError if the data cannot be decoded.
	"""
	with Image.open(path) as image:
		image.load()
		return image_to_buffer(image)

def save_image(buffer: PixelBuffer, path: Union[Path, str]) -> None:
	"""
	Encode a PixelBuffer to path, format chosen from the extension.

	Alpha is dropped for formats that cannot store it. Raises OSError if the
	destination cannot be written.
	"""
	path = Path(path)
	image = buffer_to_image(buffer)

	if path.suffix.lower() in NO_ALPHA_EXTENSIONS:
		image = image.convert('RGB')

	image.save(path, **get_pil_save_kwargs(path))

def resolve_input_path(name: Union[Path, str]) -> Optional[Path]:
	"""
	Find an input image by name.

	Tries the path as given, then the same relative path one directory up
	(for runs started from a build/ or output/ subdirectory).
	"""
	path = Path(name)
	if path.is_file():
		return path

	if not path.is_absolute():
		parent_candidate = Path('..') / path
		if parent_candidate.is_file():
			return parent_candidate

	return None

if __name__ == '__main__':
	print('__main__ not supported in modules.')
