from pathlib import Path

from lumawarp import FilterEngine, load_image, save_image

def apply_glitch():
	"""Apply a reproducible glitch to the example image"""
	input_path = Path(__file__).parent / "example_input.png"
	output_path = Path(__file__).parent / f"{Path(__file__).stem}.png"
	
	print(f"Loading {input_path.name}...")
	buffer = load_image(input_path)
	
	print("Applying glitch (seed 2016)...")
	engine = FilterEngine(seed=2016)
	engine.apply(buffer, 'glitch')
	
	print(f"Saving to {output_path.name}...")
	save_image(buffer, output_path)
	print("Done!")

if __name__ == "__main__":
	apply_glitch()
