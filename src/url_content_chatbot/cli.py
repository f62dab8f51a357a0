"""
Terminal front-end for the URL content chatbot, built with Rich and Typer.
"""

import asyncio
import json
from typing import Any, Dict, List, Optional

import typer
from rich import box
from rich.console import Console
from rich.markdown import Markdown
from rich.panel import Panel
from rich.progress import Progress, SpinnerColumn, TextColumn
from rich.prompt import Prompt
from rich.table import Table

from .models import Message, MessageRole
from .system import URLContentChatbot

console = Console()
app = typer.Typer(
    name="url-chatbot",
    help="Chat with an AI assistant about the content of any web page.",
    add_completion=False,
    rich_markup_mode="rich"
)


HELP_TEXT = """
## Commands

- `url <address>` - Analyze a new page (the current one is released first)
- `debug` - Show created objects and the API call log
- `delete` - Delete created objects and reset the chat
- `help` - Show this help message
- `quit`, `exit` - Delete created objects and leave

Anything else is sent to the assistant.
"""


def render_messages(messages: List[Message]) -> Table:
    """Render the conversation as a table."""
    table = Table(box=box.SIMPLE, show_header=False, expand=True)
    table.add_column("Who", style="bold", width=10)
    table.add_column("Message")
    table.add_column("Time", style="dim", width=10)

    for message in messages:
        who = "[cyan]You[/cyan]" if message.role == MessageRole.USER else "[green]Assistant[/green]"
        table.add_row(who, message.text, message.created_at.astimezone().strftime("%H:%M:%S"))
    return table


def render_debug(debug: Dict[str, Any]) -> Panel:
    """Render created objects and API calls."""
    table = Table(title="API Calls", box=box.ROUNDED, expand=True)
    table.add_column("Time", style="dim", width=10)
    table.add_column("Method", style="yellow", width=7)
    table.add_column("Endpoint", style="cyan")
    table.add_column("Status", width=7)
    table.add_column("Response")

    for call in debug["api_calls"]:
        status = str(call["status_code"]) if call["status_code"] is not None else "[red]error[/red]"
        table.add_row(
            call["timestamp"][11:19],
            call["method"],
            call["endpoint"],
            status,
            json.dumps(call["response"])[:120]
        )

    created = ", ".join(debug["created_objects"]) or "None"
    header = f"State: [bold]{debug['state']}[/bold]    Created Objects: [bold]{created}[/bold]"
    return Panel(
        table,
        title="[bold cyan]API Debug Information[/bold cyan]",
        subtitle=header,
        border_style="cyan"
    )


def show_result(result: Dict[str, Any]) -> None:
    if result["success"]:
        console.print(Panel(result["message"], title="[bold green]Assistant[/bold green]", border_style="green"))
    else:
        console.print(Panel(
            f"{result['message']}\n\n[dim]{result.get('error') or ''}[/dim]",
            title="[bold red]Error[/bold red]",
            border_style="red"
        ))


async def analyze(system: URLContentChatbot, url: str) -> Dict[str, Any]:
    with Progress(SpinnerColumn(), TextColumn("[progress.description]{task.description}"),
                  console=console, transient=True) as progress:
        progress.add_task("Processing URL content... this may take 10-30 seconds", total=None)
        return await system.process_url(url)


async def interactive_mode(system: URLContentChatbot, url: Optional[str]) -> None:
    """Run the interactive chat loop."""
    if url:
        show_result(await analyze(system, url))

    console.print(Markdown(HELP_TEXT))

    try:
        while True:
            prompt = "[bold cyan]Ask me anything[/bold cyan]" if system.context.can_send else "[bold cyan]Enter a URL[/bold cyan]"
            user_input = (await asyncio.to_thread(Prompt.ask, prompt, default="", show_default=False)).strip()

            if not user_input:
                continue

            command = user_input.lower()
            if command in ("quit", "exit"):
                break
            if command == "help":
                console.print(Markdown(HELP_TEXT))
                continue
            if command == "debug":
                console.print(render_debug(system.get_debug_info()))
                continue
            if command == "delete":
                show_result(await system.delete_objects())
                continue
            if command.startswith("url "):
                show_result(await analyze(system, user_input[4:].strip()))
                continue
            if not system.context.can_send:
                show_result(await analyze(system, user_input))
                continue

            result = await system.send_message(user_input)
            console.print(render_messages(system.context.messages[-2:]))
            if not result["success"]:
                console.print(f"[dim]{result.get('error')}[/dim]")
    except (KeyboardInterrupt, EOFError):
        console.print()
    finally:
        result = await system.delete_objects()
        if not result["success"]:
            console.print(f"[yellow]{result['error']}[/yellow]")
        await system.aclose()
        console.print(Panel("[bold green]Goodbye![/bold green]", border_style="green"))


@app.command()
def chat(
    url: Optional[str] = typer.Argument(None, help="Web page to analyze"),
    config: Optional[str] = typer.Option(None, "--config", "-c", help="Path to the configuration file")
) -> None:
    """Analyze a web page and chat about it."""
    try:
        system = URLContentChatbot(config)
    except (RuntimeError, ValueError) as e:
        console.print(f"[red]Failed to start: {str(e)}[/red]")
        raise typer.Exit(code=1)

    asyncio.run(interactive_mode(system, url))


@app.command()
def info(
    config: Optional[str] = typer.Option(None, "--config", "-c", help="Path to the configuration file")
) -> None:
    """Show the active configuration."""
    try:
        system = URLContentChatbot(config)
    except (RuntimeError, ValueError) as e:
        console.print(f"[red]Failed to start: {str(e)}[/red]")
        raise typer.Exit(code=1)

    details = system.get_system_info()
    table = Table(title="System Configuration", box=box.ROUNDED)
    table.add_column("Property", style="cyan", width=22)
    table.add_column("Value", style="white")
    table.add_row("Agent Name", details["agent"]["name"])
    table.add_row("Gateway", details["gateway"]["base_url"])
    table.add_row("Timeout", f"{details['gateway']['timeout']}s")
    table.add_row("Content Object", details["pipeline"]["content_object_name"])
    table.add_row("Summary Object", details["pipeline"]["summary_object_name"])
    table.add_row("Log File", details["logging"]["log_file"])
    console.print(table)
    asyncio.run(system.aclose())


def main() -> None:
    app()
