"""CLI entry-point: run the gateway, or drive jobs against a running one."""

import asyncio
import logging
from pathlib import Path

import typer
from rich.console import Console

from retouch.config import get_settings
from retouch.errors import RetouchError
from retouch.orchestrator import GatewayClient, JobOrchestrator, OrchestratorCallbacks, OrchestratorConfig

app = typer.Typer(help="Retouch: AI inpainting and cleanup through a credential-holding gateway")


def _read(path: str, console: Console) -> bytes:
    p = Path(path)
    if not p.is_file():
        console.print(f"[red]Error: file not found: {path}[/red]")
        raise typer.Exit(1)
    return p.read_bytes()


@app.command()
def serve(
    host: str = typer.Option(None, help="Bind address (default from HOST)"),
    port: int = typer.Option(None, help="Port (default from PORT)"),
    reload: bool = typer.Option(False, "--reload", help="Reload on code changes"),
):
    """Run the gateway API server."""
    import uvicorn

    settings = get_settings()
    uvicorn.run(
        "backend.main:app",
        host=host or settings.host,
        port=port or settings.port,
        reload=reload,
    )


@app.command()
def inpaint(
    image_path: str = typer.Argument(..., help="Source image"),
    mask_path: str = typer.Argument(..., help="Mask image (white = area to repaint)"),
    prompt: str = typer.Option("", help="Text prompt; empty uses the background"),
    outputs: int = typer.Option(None, help="Number of results (default from INPAINT_OUTPUTS)"),
    gateway_url: str = typer.Option(None, help="Gateway base URL (default from GATEWAY_URL)"),
    max_attempts: int = typer.Option(None, help="Polls before timing out (default from POLL_MAX_ATTEMPTS)"),
    interval: float = typer.Option(None, help="Seconds between polls (default from POLL_INTERVAL)"),
    debug: bool = typer.Option(False, "--debug", help="Log payload and result sizes"),
):
    """Start an inpaint job and poll it until results are ready."""
    console = Console()
    settings = get_settings()
    if debug:
        logging.basicConfig(level=logging.DEBUG)

    overrides = {"debug": debug}
    if outputs is not None:
        overrides["output_count"] = outputs
    if max_attempts is not None:
        overrides["max_attempts"] = max_attempts
    if interval is not None:
        overrides["poll_interval"] = interval
    config = OrchestratorConfig.from_settings(settings, **overrides)

    image = _read(image_path, console)
    mask = _read(mask_path, console)

    callbacks = OrchestratorCallbacks(
        on_submitted=lambda handle: console.print(f"Started job [bold]{handle.id}[/bold]"),
        on_poll=lambda job_id, n, snap: console.print(f"Poll #{n}: {snap.status.value}"),
    )

    async def _run() -> list[str]:
        async with GatewayClient(gateway_url or settings.gateway_url, settings.request_timeout) as client:
            orchestrator = JobOrchestrator(client, config, callbacks)
            return await orchestrator.inpaint(image, mask, prompt)

    try:
        results = asyncio.run(_run())
    except RetouchError as e:
        console.print(f"[red]Error: {e}[/red]")
        raise typer.Exit(1)

    console.print(f"[green]Got {len(results)} result(s)[/green]")
    for ref in results:
        console.print(ref)


@app.command()
def clean(
    image_path: str = typer.Argument(..., help="Source image"),
    mask_path: str = typer.Argument(..., help="Mask of the object to remove"),
    output: str = typer.Option("cleaned.png", "--output", "-o", help="Where to write the PNG"),
    gateway_url: str = typer.Option(None, help="Gateway base URL (default from GATEWAY_URL)"),
):
    """Remove the masked object and write the cleaned image."""
    console = Console()
    settings = get_settings()
    image = _read(image_path, console)
    mask = _read(mask_path, console)

    async def _run():
        async with GatewayClient(gateway_url or settings.gateway_url, settings.request_timeout) as client:
            return await JobOrchestrator(client).cleanup(image, mask)

    try:
        artifact = asyncio.run(_run())
    except RetouchError as e:
        console.print(f"[red]Error: {e}[/red]")
        raise typer.Exit(1)

    out = Path(output)
    out.parent.mkdir(parents=True, exist_ok=True)
    out.write_bytes(artifact.content)
    console.print(f"Wrote {out}")


if __name__ == "__main__":
    app()
