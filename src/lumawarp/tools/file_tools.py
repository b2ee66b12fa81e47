from pathlib import Path
from typing import List

import natsort

IMAGE_EXTENSIONS = {'.png', '.jpg', '.jpeg', '.bmp', '.gif', '.tiff', '.tif', '.webp'}

def list_images(input_dir: Path, recursive: bool = True) -> List[Path]:
	search_glob = '**/*' if recursive else '*'
	image_paths = set()
	
	for file_path in input_dir.glob(search_glob):
		if file_path.is_file() and file_path.suffix.lower() in IMAGE_EXTENSIONS:
			image_paths.add(file_path)
	
	return natsort.os_sorted(image_paths)

def output_name(input_path: Path, filter_name: str, suffix: str = '.png') -> str:
	"""{stem}-{filter}{suffix}, e.g. photo-glitch.png"""
	return f"{input_path.stem}-{filter_name.replace('_', '-')}{suffix}"

if __name__ == '__main__':
	print('__main__ not supported in modules.')
