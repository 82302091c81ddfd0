import json
from pathlib import Path
from typing import Any
import typer
from rich.console import Console
from rich.markup import escape


CONSOLE = Console()


def fail(message: str) -> typer.Exit:
    """
    Print an error message and build the exit signal for a failed command.
    :param message: The message to print, plain text.
    :return: The exception to raise.
    """
    CONSOLE.print(f'[bold red]Error:[/bold red] {escape(message)}')
    return typer.Exit(code=1)


def load_json_file(path: Path) -> Any:
    """
    Read and decode a JSON file given on the command line.
    :param path: Path to the file.
    :return: The decoded JSON data.
    """
    try:
        with path.open(encoding='utf-8') as f:
            return json.load(f)
    except OSError as e:
        raise fail(f'Cannot read {path}: {e.strerror}') from e
    except UnicodeDecodeError as e:
        raise fail(f'{path} is not UTF-8 encoded: {e.reason}') from e
    except json.JSONDecodeError as e:
        raise fail(f'{path} is not valid JSON: {e}') from e
