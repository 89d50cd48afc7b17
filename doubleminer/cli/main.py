import logging
import time
import typer
import requests
import os

from doubleminer.config import settings
from doubleminer.logs import setup_logging

app = typer.Typer()
BASE = os.getenv("API_BASE", "http://127.0.0.1:8000")
API_KEY = os.getenv("API_KEY")
logger = logging.getLogger(__name__)


def _headers():
    h = {}
    if API_KEY:
        h["X-API-Key"] = API_KEY
    return h


@app.command()
def ingest(color: str, number: int):
    r = requests.post(f"{BASE}/outcomes", json={"color": color, "number": number}, headers=_headers())
    typer.echo(r.json())


@app.command()
def simulate():
    r = requests.post(f"{BASE}/simulate", headers=_headers())
    typer.echo(r.json())


@app.command()
def signal():
    r = requests.get(f"{BASE}/signal", headers=_headers())
    typer.echo(r.json())


@app.command()
def stats():
    r = requests.get(f"{BASE}/stats", headers=_headers())
    typer.echo(r.json())


@app.command()
def patterns():
    r = requests.get(f"{BASE}/patterns", headers=_headers())
    typer.echo(r.json())


@app.command()
def anomalies():
    r = requests.get(f"{BASE}/anomalies", headers=_headers())
    typer.echo(r.json())


@app.command()
def sync(limit: int = 100):
    r = requests.post(f"{BASE}/sync", params={"limit": limit}, headers=_headers())
    typer.echo(r.json())


@app.command()
def live(interval: float = typer.Option(settings.live_interval, help="seconds between simulated rounds"),
         rounds: int = typer.Option(0, help="stop after N rounds (0 = forever)")):
    """Feed a simulated outcome to the server every INTERVAL seconds."""
    setup_logging()
    n = 0
    while not rounds or n < rounds:
        try:
            r = requests.post(f"{BASE}/simulate", headers=_headers(), timeout=30)
            r.raise_for_status()
            body = r.json()
            sig = body.get("signal") or {}
            if body.get("stored") is None:
                typer.echo("no new outcome")
            else:
                typer.echo(f"{body['stored']['color']:>5} {body['stored']['number']:>2} -> "
                           f"{sig.get('action')} {sig.get('color') or ''} {sig.get('confidence', 0):.1f}% {sig.get('strategy')}")
        except requests.RequestException as e:
            logger.warning("simulate failed: %s", e)
        n += 1
        if not rounds or n < rounds:
            time.sleep(interval)


@app.command("export")
def export_(path: str):
    r = requests.get(f"{BASE}/export", headers=_headers())
    r.raise_for_status()
    with open(path, "w", encoding="utf-8") as fh:
        fh.write(r.text)
    typer.echo(f"saved backup to {path}")


@app.command("import")
def import_(path: str):
    with open(path, encoding="utf-8") as fh:
        raw = fh.read()
    r = requests.post(f"{BASE}/import", data=raw.encode("utf-8"),
                      headers={**_headers(), "Content-Type": "text/plain"})
    typer.echo(r.json())


if __name__ == "__main__":
    app()
