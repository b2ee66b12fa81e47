from rich.console import Console

"""
Shared Rich consoles for the command line tools
"""

console = Console()

# Help screens stay readable on wide terminals
help_console = Console(width=min(80, console.width))

# Errors and warnings go to stderr so stdout stays clean for piping
error_console = Console(stderr=True)

if __name__ == '__main__':
	print('__main__ not supported in modules.')
