from rich.console import Console
from rich.markup import escape

from .errors import LaunchError, NotFoundError, ObsStreamSetupError

console = Console(highlight=False)
error_console = Console(stderr=True, highlight=False)


def print_info(message: str) -> None:
    console.print(f"[cyan]INFO[/cyan] {escape(message)}")


def print_warning(message: str) -> None:
    error_console.print(f"[yellow]WARNING[/yellow] {escape(message)}")


def print_fatal(message: str) -> None:
    error_console.print(f"[bold red]FATAL[/bold red] {escape(message)}")


def print_error(error: ObsStreamSetupError) -> None:
    message = error.message
    if error.path is not None and str(error.path) not in message:
        message = f"{message} ({error.path})"

    # 起動の失敗は後続のステップを止めないので警告扱い
    if isinstance(error, (NotFoundError, LaunchError)):
        print_warning(message)
    else:
        print_fatal(message)
