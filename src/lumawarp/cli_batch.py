import argparse
import sys
import time
from pathlib import Path
from typing import List, Optional, Tuple

from rich.markup import escape
from rich.panel import Panel
from rich.progress import BarColumn, Progress, SpinnerColumn, TextColumn, TimeElapsedColumn, TimeRemainingColumn
from rich.table import Table

from lumawarp.filters import DEFAULT_AMPLITUDE, DEFAULT_INTENSITY, FILTER_TITLES, FilterEngine, resolve_filter
from lumawarp.tools import file_tools
from lumawarp.tools.image_tools import load_image, save_image
from lumawarp.tools.print_tools import console, error_console, help_console

"""
LumaWarp Batch CLI - Apply one filter to directories of images
"""

def render_help():
	"""Render custom help output using Rich"""

	# Header
	help_console.print()
	help_console.print(Panel.fit(
		"[bold cyan]LumaWarp Batch[/bold cyan]\n"
		"Apply one pixel filter to a directory of images",
		border_style="cyan"
	))
	help_console.print()

	# Usage Pattern
	usage = Table.grid(padding=(0, 1))
	usage.add_column(style="cyan")
	usage.add_column(style="white")
	usage.add_row("[bold]Input only:[/bold]", "Saves next to each input with a -{filter} suffix")
	usage.add_row("", "[dim]lumawarp-batch photos/ --filter glitch[/dim]")
	usage.add_row("", "")
	usage.add_row("[bold]Input + Output:[/bold]", "Saves to output directory")
	usage.add_row("", "[dim]lumawarp-batch photos/ processed/ --filter 5[/dim]")

	help_console.print(Panel(usage, title="[bold]Usage Patterns[/bold]", border_style="blue"))
	help_console.print()

	# Options
	options = Table.grid(padding=(0, 1))
	options.add_column(style="cyan", width=20)
	options.add_column(style="white")

	options.add_row("  --filter", "1-5 | solar_rays | wave_distortion | color_noise | glitch | grayscale")
	options.add_row("  --amplitude", f"float  [dim](default: {DEFAULT_AMPLITUDE})[/dim]")
	options.add_row("  --intensity", f"float  [dim](default: {DEFAULT_INTENSITY})[/dim]")
	options.add_row("  --recursive", "Search subdirectories")
	options.add_row("  --seed", "int  [dim]Seed for noise and glitch[/dim]")
	options.add_row("  --random-seed", "Different seed per image (requires --seed)")

	help_console.print(Panel(options, title="[bold]Options[/bold]", border_style="blue"))
	help_console.print()

	# Footer
	help_console.print("[dim]For single images, see: [cyan]lumawarp --help[/cyan][/dim]")
	help_console.print()

def parse_arguments(argv: Optional[List[str]] = None) -> argparse.Namespace:
	parser = argparse.ArgumentParser(
		description='Batch apply a pixel filter to a directory of images',
		add_help=False
	)

	parser.add_argument('input_dir', type=str, help='Input directory containing images')
	parser.add_argument('output_dir', type=str, nargs='?', default=None, help='Output directory (optional, defaults to in-place with suffix)')
	parser.add_argument('--filter', type=str, required=True, help='Filter number 1-5 or name')
	parser.add_argument('--amplitude', type=float, default=DEFAULT_AMPLITUDE, help='Wave distortion amplitude')
	parser.add_argument('--intensity', type=float, default=DEFAULT_INTENSITY, help='Color noise intensity')
	parser.add_argument('--recursive', action='store_true', help='Search subdirectories recursively')
	parser.add_argument('--seed', type=int, default=None, help='Base random seed (default: OS entropy)')
	parser.add_argument('--random-seed', action='store_true', help='Offset the seed per image instead of sharing one generator')

	return parser.parse_args(argv)

def process_image(input_path: Path, output_path: Path, engine: FilterEngine, filter_name: str) -> Tuple[bool, str]:
	"""Filter a single image file, return (success, error_message)"""
	try:
		buffer = load_image(input_path)
		engine.apply(buffer, filter_name)
		save_image(buffer, output_path)
		return True, ""

	except Exception as e:
		return False, str(e)

def main(argv: Optional[List[str]] = None) -> int:
	"""Main CLI entry point for batch processing"""
	args_list = sys.argv[1:] if argv is None else argv

	# Check for help flag before parsing
	if '--help' in args_list or '-h' in args_list:
		render_help()
		return 0

	args = parse_arguments(args_list)

	try:
		filter_name = resolve_filter(args.filter)
		shared_engine = FilterEngine(amplitude=args.amplitude, intensity=args.intensity, seed=args.seed)
	except ValueError as e:
		error_console.print(f"[red]Error:[/red] {escape(str(e))}")
		return 1

	if args.random_seed and args.seed is None:
		error_console.print("[red]Error:[/red] --random-seed requires --seed")
		return 1

	# Validate directories
	input_dir = Path(args.input_dir)
	if not input_dir.exists():
		error_console.print(f"[red]Error:[/red] Input directory [bright_yellow]{escape(str(input_dir))}[/bright_yellow] not found")
		return 1
	if not input_dir.is_dir():
		error_console.print(f"[red]Error:[/red] [bright_yellow]{escape(str(input_dir))}[/bright_yellow] is not a directory")
		return 1

	output_dir = Path(args.output_dir) if args.output_dir is not None else None
	if output_dir is not None:
		output_dir.mkdir(parents=True, exist_ok=True)

	# Find images
	search_mode = "recursively" if args.recursive else "in current directory only"
	console.print(f"[cyan]Scanning[/cyan] [bright_yellow]{escape(str(input_dir))}[/bright_yellow] {search_mode}...")
	images = file_tools.list_images(input_dir, recursive=args.recursive)

	# Never re-filter our own outputs when writing in place
	suffix = f"-{filter_name.replace('_', '-')}"
	if output_dir is None:
		images = [path for path in images if not path.stem.endswith(suffix)]

	if not images:
		error_console.print(f"[red]Error:[/red] No images found in [bright_yellow]{escape(str(input_dir))}[/bright_yellow]")
		error_console.print(f"Supported formats: {', '.join(sorted(file_tools.IMAGE_EXTENSIONS))}")
		return 1

	console.print(f"[green]Found {len(images)} images[/green]")

	# Display configuration panel
	config_table = Table.grid(padding=(0, 2))
	config_table.add_column(style="cyan", justify="right")
	config_table.add_column(style="white")

	config_table.add_row("Images:", f"{len(images)}")
	config_table.add_row("Filter:", f"[bold]{FILTER_TITLES[filter_name]}[/bold]")
	config_table.add_row("Output:", f"[bright_yellow]{escape(str(output_dir))}[/bright_yellow]" if output_dir else "[dim]in place[/dim]")
	if args.recursive:
		config_table.add_row("Recursive:", "[green]Yes[/green]")
	if args.seed is not None:
		config_table.add_row("Seed:", f"{args.seed}" + (" [dim](+ image index)[/dim]" if args.random_seed else ""))

	console.print()
	console.print(Panel(config_table, title="[bold]Batch Pixel Filtering[/bold]", border_style="blue"))
	console.print()

	start_time = time.time()
	success_count = 0
	failed_images = []

	progress_columns = [
		SpinnerColumn(),
		TextColumn("[progress.description]{task.description}"),
		BarColumn(),
		TextColumn("[progress.percentage]{task.percentage:>3.0f}%"),
		TextColumn("|"),
		TextColumn("[cyan]{task.completed}/{task.total}"),
		TextColumn("|"),
		TimeElapsedColumn(),
		TextColumn("|"),
		TimeRemainingColumn()
	]

	with Progress(*progress_columns, console=console) as progress:
		task = progress.add_task("[green]Filtering...", total=len(images))

		for idx, input_path in enumerate(images, 1):
			progress.update(task, description=f"[bright_yellow]{escape(input_path.name)}[/bright_yellow]")

			engine = shared_engine
			if args.random_seed:
				engine = FilterEngine(amplitude=args.amplitude, intensity=args.intensity, seed=args.seed + idx)

			if output_dir is None:
				output_path = input_path.parent / file_tools.output_name(input_path, filter_name)
			else:
				relative = input_path.parent.relative_to(input_dir)
				output_path = output_dir / relative / file_tools.output_name(input_path, filter_name)
				output_path.parent.mkdir(parents=True, exist_ok=True)

			success, error = process_image(input_path, output_path, engine, filter_name)

			if success:
				success_count += 1
			else:
				failed_images.append((str(input_path.relative_to(input_dir)), error))

			progress.advance(task)

	# Display summary
	elapsed = time.time() - start_time
	fail_count = len(failed_images)

	console.print()

	summary = Table(show_header=True, header_style="bold cyan", border_style="blue")
	summary.add_column("Metric", style="cyan", justify="right")
	summary.add_column("Value", style="white")

	summary.add_row("Total images", str(len(images)))
	summary.add_row("Successful", f"[green]{success_count}[/green]")
	if fail_count > 0:
		summary.add_row("Failed", f"[red]{fail_count}[/red]")
	summary.add_row("Total time", f"{elapsed:.1f}s")
	summary.add_row("Average time", f"{elapsed / len(images):.2f}s per image")

	console.print(Panel(summary, title="[bold]Batch Summary[/bold]", border_style="green" if fail_count == 0 else "yellow"))

	# Report failed images if any
	if failed_images:
		console.print()
		error_table = Table(show_header=True, header_style="bold red", border_style="red")
		error_table.add_column("File", style="bright_yellow")
		error_table.add_column("Error", style="white")

		for filename, error in failed_images:
			error_table.add_row(escape(filename), escape(error))

		console.print(Panel(error_table, title="[bold red]Failed Images[/bold red]", border_style="red"))

	console.print()

	return 0 if fail_count == 0 else 1

if __name__ == '__main__':
	sys.exit(main())
