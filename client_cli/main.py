from __future__ import annotations

from typing import Optional
from pathlib import Path
import json
import os

import typer
from rich.console import Console
from rich.syntax import Syntax
import httpx
from websockets.exceptions import ConnectionClosed
from websockets.sync.client import connect


app = typer.Typer(help="Command line client for the itinerary stream planner.")
console = Console()
trace_console = Console(stderr=True)

LEVEL_STYLES = {
    "info": "cyan",
    "success": "green",
    "error": "bold red",
}


def _base_url() -> str:
    return os.getenv("PLANNER_URL", "http://localhost:3000").rstrip("/")


def _headers() -> dict:
    headers = {"Accept": "text/event-stream", "Content-Type": "application/json"}
    api_key = os.getenv("PLANNER_API_KEY")
    if api_key:
        headers["X-API-KEY"] = api_key
    return headers


def parse_sse_line(raw_line: str | bytes) -> Optional[dict]:
    """Decode one ``data:`` line of the planner event stream, or None."""
    line = raw_line.decode("utf-8") if isinstance(raw_line, (bytes, bytearray)) else raw_line
    line = line.strip()
    if not line or not line.startswith("data:"):
        return None
    data = line[len("data:"):].strip()
    try:
        payload = json.loads(data)
    except json.JSONDecodeError:
        return None
    return payload if isinstance(payload, dict) else None


def render_response(response: str) -> None:
    try:
        parsed = json.loads(response)
    except json.JSONDecodeError:
        console.print(response)
        return
    console.print(Syntax(json.dumps(parsed, indent=2, ensure_ascii=False), "json"))


@app.command()
def plan(
    request_file: Path = typer.Argument(..., exists=True, readable=True, help="JSON file with hotel, activities and preferences."),
    mode: Optional[str] = typer.Option(None, "--mode", "-m", help="Override the request mode ('quick' or 'full')."),
    output_file: Optional[Path] = typer.Option(None, "--output", "-o", help="Save the final JSON response to a file."),
    show_chunks: bool = typer.Option(True, "--chunks/--no-chunks", help="Echo raw chunks while streaming."),
) -> None:
    body = json.loads(request_file.read_text(encoding="utf-8"))
    if mode:
        body["mode"] = mode

    final: Optional[str] = None
    with console.status("Planning your itinerary..."):
        try:
            with httpx.stream(
                "POST",
                f"{_base_url()}/api/generate-itinerary",
                json=body,
                headers=_headers(),
                timeout=120,
            ) as resp:
                if resp.status_code != 200:
                    resp.read()
                    try:
                        detail = resp.json().get("error") or resp.text
                    except json.JSONDecodeError:
                        detail = resp.text
                    trace_console.print(f"Request failed ({resp.status_code}): {detail}", style="bold red")
                    raise typer.Exit(code=1)
                for raw_line in resp.iter_lines():
                    payload = parse_sse_line(raw_line)
                    if payload is None:
                        continue
                    ptype = payload.get("type")
                    if ptype == "chunk":
                        if show_chunks:
                            trace_console.print(payload.get("content", ""), end="", style="dim")
                    elif ptype == "done":
                        final = payload.get("response", "")
                        break
                    elif ptype == "error":
                        trace_console.print(f"\n{payload.get('error', 'Unknown error')}", style="bold red")
                        raise typer.Exit(code=1)
        except httpx.HTTPError as e:
            trace_console.print(f"Request failed: {e}", style="bold red")
            raise typer.Exit(code=1)

    if final is None:
        trace_console.print("Stream ended without a result.", style="bold red")
        raise typer.Exit(code=1)

    console.print()
    render_response(final)
    if output_file:
        output_file.parent.mkdir(parents=True, exist_ok=True)
        output_file.write_text(final, encoding="utf-8")
        console.print(f"\nSaved itinerary to {output_file}", style="green")


@app.command()
def health() -> None:
    try:
        resp = httpx.get(f"{_base_url()}/api/health", timeout=10)
        resp.raise_for_status()
    except httpx.HTTPError as e:
        trace_console.print(f"Health check failed: {e}", style="bold red")
        raise typer.Exit(code=1)
    data = resp.json()
    style = "green" if data.get("gemini") else "yellow"
    console.print(f"status={data.get('status')} gemini={data.get('gemini')}", style=style)


@app.command()
def watch() -> None:
    """Stream debug records from the server until interrupted."""
    ws_url = _base_url().replace("https://", "wss://").replace("http://", "ws://") + "/ws"
    try:
        with connect(ws_url) as ws:
            for raw in ws:
                try:
                    record = json.loads(raw)
                except json.JSONDecodeError:
                    continue
                level = record.get("level", "info")
                console.print(
                    f"[{record.get('timestamp', '--:--:--')}] {record.get('message', '')}",
                    style=LEVEL_STYLES.get(level, "white"),
                    markup=False,
                )
    except KeyboardInterrupt:
        pass
    except (ConnectionClosed, OSError) as e:
        trace_console.print(f"Debug channel closed: {e}", style="bold red")
        raise typer.Exit(code=1)


if __name__ == "__main__":
    app()
