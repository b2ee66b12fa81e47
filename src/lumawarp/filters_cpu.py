import math

import numpy as np
from numba import njit, prange

"""
CPU filter kernels compiled with Numba.

Every kernel works on a (height, width, 4) uint8 array in place and
parallelises over rows, which never depend on each other.
"""

MAX_CHANNEL = 255

SOLAR_RAY_COUNT = 10
SOLAR_MAX_BOOST = 100.0

WAVE_PERIOD = 128.0

GLITCH_ROW_STRIDE = 10
GLITCH_RED_ROW = 20
GLITCH_GREEN_ROW = 15
GLITCH_BOOST = 50

@njit(parallel=True)
def solar_rays_kernel(img):
	"""
	Radial brightening: sinusoidal in angle, fading linearly with distance
	from the integer center.
	"""
	height, width = img.shape[0], img.shape[1]
	center_x = width // 2
	center_y = height // 2
	max_dist = math.sqrt(center_x * center_x + center_y * center_y)

	for y in prange(height):
		for x in range(width):
			dx = float(x - center_x)
			dy = float(y - center_y)
			dist = math.sqrt(dx * dx + dy * dy)
			angle = math.atan2(dy, dx)

			# A 1x1 image has no radius to fade over
			if max_dist > 0.0:
				falloff = 1.0 - dist / max_dist
			else:
				falloff = 0.0

			intensity = max(0.0, math.sin(angle * SOLAR_RAY_COUNT) * falloff) * SOLAR_MAX_BOOST
			boost = int(intensity)

			for c in range(3):
				img[y, x, c] = min(MAX_CHANNEL, img[y, x, c] + boost)

@njit(parallel=True)
def wave_distortion_kernel(src, dst, amplitude):
	"""
	Remap each destination pixel from a sinusoidally offset source position.

	src and dst must not alias. Samples outside src read as opaque black.
	"""
	height, width = src.shape[0], src.shape[1]
	# Any offset past this lands outside the image; keeps int() in range
	limit = float(width + height + 1)

	for y in prange(height):
		offset_x = int(max(-limit, min(limit, amplitude * math.sin(2.0 * math.pi * y / WAVE_PERIOD))))
		for x in range(width):
			offset_y = int(max(-limit, min(limit, amplitude * math.cos(2.0 * math.pi * x / WAVE_PERIOD))))
			src_x = x + offset_x
			src_y = y + offset_y

			if 0 <= src_x < width and 0 <= src_y < height:
				for c in range(4):
					dst[y, x, c] = src[src_y, src_x, c]
			else:
				dst[y, x, 0] = 0
				dst[y, x, 1] = 0
				dst[y, x, 2] = 0
				dst[y, x, 3] = MAX_CHANNEL

@njit(parallel=True)
def color_noise_kernel(img, draws, noise_factor):
	"""
	Add scaled integer draws to R, G, B with saturation.

	draws has shape (height, width, 3), one draw per color channel.
	"""
	height, width = img.shape[0], img.shape[1]

	for y in prange(height):
		for x in range(width):
			for c in range(3):
				# Saturate in float first: huge factors would overflow int64
				noise = min(255.0, max(-255.0, draws[y, x, c] * noise_factor))
				value = img[y, x, c] + int(noise)
				img[y, x, c] = min(MAX_CHANNEL, max(0, value))

@njit(parallel=True)
def glitch_kernel(img, shifts):
	"""
	Rotate every GLITCH_ROW_STRIDE-th row right by its shift, boosting red on
	rows divisible by 20 and green on the remaining rows divisible by 15.

	shifts holds one shift per processed row (row y uses shifts[y // stride]).
	"""
	width = img.shape[1]

	for row in prange(shifts.shape[0]):
		y = row * GLITCH_ROW_STRIDE
		shift = shifts[row]
		source = img[y].copy()

		for x in range(width):
			new_x = (x + shift) % width
			r = np.int64(source[x, 0])
			g = np.int64(source[x, 1])

			if y % GLITCH_RED_ROW == 0:
				r = min(MAX_CHANNEL, r + GLITCH_BOOST)
			elif y % GLITCH_GREEN_ROW == 0:
				g = min(MAX_CHANNEL, g + GLITCH_BOOST)

			img[y, new_x, 0] = r
			img[y, new_x, 1] = g
			img[y, new_x, 2] = source[x, 2]
			img[y, new_x, 3] = source[x, 3]

@njit(parallel=True)
def grayscale_kernel(img):
	"""Replace R, G, B with their rounded Rec. 601 luma"""
	height, width = img.shape[0], img.shape[1]

	for y in prange(height):
		for x in range(width):
			luma = 0.299 * img[y, x, 0] + 0.587 * img[y, x, 1] + 0.114 * img[y, x, 2]
			gray = min(MAX_CHANNEL, int(luma + 0.5))
			img[y, x, 0] = gray
			img[y, x, 1] = gray
			img[y, x, 2] = gray

def check_filter_kernels():
	print("Filter kernels CPU - basic test")
	print("=" * 60)

	print("Generating test image (64x64)...")
	test_img = np.random.randint(0, 256, size=(64, 64, 4)).astype(np.uint8)

	print("Running kernels (first run will trigger Numba JIT compilation)...")
	solar_rays_kernel(test_img)
	wave_distortion_kernel(test_img.copy(), test_img, 10.0)
	color_noise_kernel(test_img, np.random.randint(-250, 251, size=(64, 64, 3)), 0.1)
	glitch_kernel(test_img, np.random.randint(0, 21, size=7))
	grayscale_kernel(test_img)

	print(f"Success! Output shape: {test_img.shape}")
	print(f"Output range: [{test_img.min()}, {test_img.max()}]")
	print("\nKernels are ready to use!")

if __name__ == "__main__":
	check_filter_kernels()
