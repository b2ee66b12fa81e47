import argparse
import sys
import time
from pathlib import Path
from typing import List, Optional

from rich.markup import escape
from rich.panel import Panel
from rich.progress import Progress, SpinnerColumn, TextColumn
from rich.table import Table

from lumawarp.filters import DEFAULT_AMPLITUDE, DEFAULT_INTENSITY, FILTER_NAMES, FILTER_TITLES, FilterEngine, resolve_filter
from lumawarp.tools.file_tools import output_name
from lumawarp.tools.image_tools import load_image, resolve_input_path, save_image
from lumawarp.tools.print_tools import console, error_console, help_console

"""
LumaWarp CLI - Single image filtering
"""

DEFAULT_INPUT_NAME = "input.png"

def render_help():
	"""Render custom help output using Rich"""

	# Header
	help_console.print()
	help_console.print(Panel.fit(
		"[bold cyan]LumaWarp[/bold cyan]\n"
		"Pixel distortion filters for your images",
		border_style="cyan"
	))
	help_console.print()

	# Quick Start
	quick_start = Table.grid(padding=(0, 2))
	quick_start.add_column(style="dim")
	quick_start.add_row("lumawarp input.png")
	quick_start.add_row("lumawarp input.png output.png --filter glitch")
	quick_start.add_row("lumawarp input.png --filter 2 --amplitude 25")

	help_console.print(Panel(quick_start, title="[bold]Quick Start[/bold]", border_style="green"))
	help_console.print()

	# Filter reference
	filter_table = Table(show_header=True, header_style="bold cyan", border_style="dim")
	filter_table.add_column("#", style="cyan", justify="center")
	filter_table.add_column("Name", style="cyan")
	filter_table.add_column("Effect")
	filter_table.add_row("1", "solar_rays", "Light rays radiating from the center")
	filter_table.add_row("2", "wave_distortion", "Sine wave displacement [dim](--amplitude)[/dim]")
	filter_table.add_row("3", "color_noise", "Per-channel random noise [dim](--intensity)[/dim]")
	filter_table.add_row("4", "glitch", "Shifted, tinted scanlines every 10 rows")
	filter_table.add_row("5", "grayscale", "Luma grayscale, alpha preserved")

	help_console.print(Panel(filter_table, title="[bold]Filters[/bold]", border_style="magenta"))
	help_console.print()

	# Options
	options = Table.grid(padding=(0, 1))
	options.add_column(style="yellow", width=20)
	options.add_column(style="dim", width=10)
	options.add_column(style="white")

	options.add_row("--filter", "1-5|name", "Filter to apply (asks interactively if omitted)")
	options.add_row("--amplitude", "float", f"Wave amplitude in pixels (default: {DEFAULT_AMPLITUDE})")
	options.add_row("--intensity", "float", f"Noise intensity (default: {DEFAULT_INTENSITY})")
	options.add_row("--seed", "int", "Random seed for noise and glitch (default: random)")
	options.add_row("--output-dir", "path", "Directory for the output, created if missing")

	help_console.print(Panel(options, title="[bold]Options[/bold]", border_style="yellow"))
	help_console.print()

	# Examples
	examples = Table.grid(padding=(0, 0))
	examples.add_column(style="white")

	examples.add_row("[dim]# Pick a filter from the menu (auto-named output: photo-glitch.png)[/dim]")
	examples.add_row("[green]lumawarp[/green] photo.png")
	examples.add_row("")
	examples.add_row("[dim]# Reproducible glitch into output/[/dim]")
	examples.add_row("[green]lumawarp[/green] photo.png --filter glitch --seed 7 --output-dir output")

	help_console.print(Panel(examples, title="[bold]Examples[/bold]", border_style="green"))
	help_console.print()

	# Footer
	help_console.print("[dim]For directories of images, see: [cyan]lumawarp-batch --help[/cyan][/dim]")
	help_console.print()

def parse_arguments(argv: Optional[List[str]] = None) -> argparse.Namespace:
	parser = argparse.ArgumentParser(
		description='Apply pixel distortion filters to images',
		add_help=False  # Disable default help to use our custom one
	)

	parser.add_argument('input', type=str, nargs='?', default=DEFAULT_INPUT_NAME, help=f'Input image file (default: {DEFAULT_INPUT_NAME})')
	parser.add_argument('output', type=str, nargs='?', default=None, help='Output image file (optional, defaults to {input}-{filter}.png)')
	parser.add_argument('--filter', type=str, default=None, help='Filter number 1-5 or name (default: ask)')
	parser.add_argument('--amplitude', type=float, default=DEFAULT_AMPLITUDE, help=f'Wave distortion amplitude (default: {DEFAULT_AMPLITUDE})')
	parser.add_argument('--intensity', type=float, default=DEFAULT_INTENSITY, help=f'Color noise intensity (default: {DEFAULT_INTENSITY})')
	parser.add_argument('--seed', type=int, default=None, help='Random seed (default: OS entropy)')
	parser.add_argument('--output-dir', type=str, default=None, help='Output directory, created if missing')

	return parser.parse_args(argv)

def prompt_filter() -> str:
	"""Show the numbered filter menu and read a choice"""
	menu = Table.grid(padding=(0, 2))
	menu.add_column(style="cyan", justify="right")
	menu.add_column(style="white")
	for number, name in enumerate(FILTER_NAMES, 1):
		menu.add_row(f"{number}.", FILTER_TITLES[name])

	console.print(Panel(menu, title="[bold]Choose a filter[/bold]", border_style="cyan", expand=False))
	return console.input("[cyan]Choice:[/cyan] ")

def main(argv: Optional[List[str]] = None) -> int:
	"""Main CLI entry point for single image processing"""
	args_list = sys.argv[1:] if argv is None else argv

	# Check for help flag before parsing
	if '--help' in args_list or '-h' in args_list:
		render_help()
		return 0

	args = parse_arguments(args_list)

	input_path = resolve_input_path(args.input)
	if input_path is None:
		error_console.print(f"[red]Error:[/red] Input file [bright_yellow]{escape(args.input)}[/bright_yellow] not found here or in the parent directory")
		return 1

	# Select the filter before loading so a bad choice fails fast
	if args.filter is not None:
		choice = args.filter
	else:
		try:
			choice = prompt_filter()
		except (EOFError, KeyboardInterrupt):
			error_console.print("[red]Error:[/red] No filter chosen")
			return 1
	try:
		filter_name = resolve_filter(choice)
		engine = FilterEngine(amplitude=args.amplitude, intensity=args.intensity, seed=args.seed)
	except ValueError as e:
		error_console.print(f"[red]Error:[/red] {escape(str(e))}")
		return 1

	# Determine output path
	if args.output is None:
		output_path = Path(output_name(input_path, filter_name))
		if args.output_dir is None:
			output_path = input_path.parent / output_path
	else:
		output_path = Path(args.output)

	if args.output_dir is not None:
		output_dir = Path(args.output_dir)
		try:
			output_dir.mkdir(parents=True, exist_ok=True)
		except OSError as e:
			error_console.print(f"[red]Error creating output directory:[/red] {escape(str(e))}")
			return 1
		output_path = output_dir / output_path.name

	# Check for overwrite
	if output_path.exists():
		response = console.input(f"[yellow]Output file [bright_yellow]{escape(str(output_path))}[/bright_yellow] exists. Overwrite? [y/N][/yellow] ")
		if response.lower() != 'y':
			console.print("[yellow]Cancelled.[/yellow]")
			return 0

	# Load image
	console.print(f"[cyan]Loading[/cyan] [bright_yellow]{escape(input_path.name)}[/bright_yellow]...")
	try:
		buffer = load_image(input_path)
	except Exception as e:
		error_console.print(f"[red]Error loading image:[/red] {escape(str(e))}")
		return 1

	# Display configuration panel
	config_table = Table.grid(padding=(0, 2))
	config_table.add_column(style="cyan", justify="right")
	config_table.add_column(style="white")

	config_table.add_row("Image:", f"[bright_yellow]{escape(input_path.name)}[/bright_yellow]")
	config_table.add_row("Size:", f"{buffer.width}x{buffer.height}")
	config_table.add_row("Filter:", f"[bold]{FILTER_TITLES[filter_name]}[/bold]")

	if filter_name == 'wave_distortion':
		config_table.add_row("Amplitude:", f"{engine.amplitude:g}")
	elif filter_name == 'color_noise':
		config_table.add_row("Intensity:", f"{engine.intensity:g}")

	if filter_name in ('color_noise', 'glitch') and args.seed is not None:
		config_table.add_row("Seed:", f"{args.seed}")

	console.print()
	console.print(Panel(config_table, title="[bold]Pixel Filtering[/bold]", border_style="blue"))
	console.print()

	start_time = time.time()

	with Progress(SpinnerColumn(), TextColumn(f"[cyan]Applying {FILTER_TITLES[filter_name].lower()}...[/cyan]"), console=console) as progress:
		progress.add_task("filter", total=None)
		engine.apply(buffer, filter_name)

	filter_time = time.time() - start_time

	# Save output
	console.print(f"[cyan]Saving to[/cyan] [bright_yellow]{escape(output_path.name)}[/bright_yellow]...")

	try:
		save_image(buffer, output_path)
	except Exception as e:
		error_console.print(f"[red]Error saving image:[/red] {escape(str(e))}")
		return 1

	# Display completion summary
	console.print()
	console.print(f"[green]✓ Done![/green] Filtered in [bold]{filter_time:.2f}s[/bold]")
	console.print(f"  Output: [bright_yellow]{escape(str(output_path))}[/bright_yellow]")
	console.print()

	return 0

if __name__ == '__main__':
	sys.exit(main())
