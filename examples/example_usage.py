from pathlib import Path

import numpy as np

from lumawarp import FILTER_NAMES, PixelBuffer, apply_filter, save_image
from lumawarp.filters import wave_distortion

"""
Example usage of the LumaWarp filters

Builds a synthetic test card and runs every filter on a copy of it.
"""

def create_test_card(width: int = 256, height: int = 256) -> PixelBuffer:
	"""Color gradient with a checkerboard, fully opaque"""
	ys, xs = np.mgrid[0:height, 0:width]
	checker = ((xs // 32 + ys // 32) % 2) * 60
	
	array = np.zeros((height, width, 4), dtype=np.uint8)
	array[:, :, 0] = (xs * 255 // max(1, width - 1)).astype(np.uint8)
	array[:, :, 1] = (ys * 255 // max(1, height - 1)).astype(np.uint8)
	array[:, :, 2] = (120 + checker).astype(np.uint8)
	array[:, :, 3] = 255
	return PixelBuffer.from_array(array, copy=False)

def example_1_every_filter():
	"""Apply each filter by its menu number"""
	print("\n" + "=" * 60)
	print("Example 1: Every filter")
	print("=" * 60)
	
	card = create_test_card()
	rng = np.random.default_rng(2016)
	
	for number, name in enumerate(FILTER_NAMES, 1):
		buffer = card.copy()
		apply_filter(buffer, number, rng=rng)
		output_path = Path(f"output_{number}_{name}.png")
		save_image(buffer, output_path)
		print(f"Saved {name} to {output_path}")

def example_2_strong_waves():
	"""Wave distortion with a large amplitude"""
	print("\n" + "=" * 60)
	print("Example 2: Strong waves")
	print("=" * 60)
	
	buffer = create_test_card()
	wave_distortion(buffer, amplitude=40.0)
	
	output_path = Path("output_strong_waves.png")
	save_image(buffer, output_path)
	print(f"Saved to {output_path}")

if __name__ == "__main__":
	example_1_every_filter()
	example_2_strong_waves()
