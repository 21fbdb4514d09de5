# Declarg Argument Parser — (c) 2025 rtj.dev LLC — MIT Licensed
"""Global console instances for standard output and standard error."""
from rich.console import Console

console = Console(highlight=False, soft_wrap=True)
error_console = Console(stderr=True, highlight=False, soft_wrap=True)
