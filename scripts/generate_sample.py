"""
Sample document generator for JSON SQL Search.

Writes deterministic pseudo-random JSON with the shapes the projection has to
cope with: nested objects, arrays of scalars and of objects, nulls, empty
containers, ISO timestamps, sparse keys and a field whose type varies.
"""

from __future__ import annotations

import json
import random
import sys
import time
from datetime import UTC, datetime, timedelta
from pathlib import Path
from typing import Any

import typer

app = typer.Typer(help="Generate nested sample JSON for loading into JSON SQL Search.")

_EPOCH = datetime(2024, 1, 1, tzinfo=UTC)
_NAMES = ["alice", "bob", "carol", "dave", "erin", "frank"]
_TAGS = ["admin", "beta", "trial", "vip"]
_ACTIONS = ["view", "click", "purchase", "impression"]


def _generate_documents(count: int, seed: int) -> list[dict[str, Any]]:
    rng = random.Random(seed)
    documents: list[dict[str, Any]] = []
    for i in range(count):
        created = _EPOCH + timedelta(seconds=rng.randint(0, 86_400 * 365))
        doc: dict[str, Any] = {
            "id": i + 1,
            "user": {
                "name": rng.choice(_NAMES),
                "active": rng.choice([True, False]),
                "email": None if rng.random() < 0.2 else f"user{i + 1}@example.com",
            },
            "tags": rng.sample(_TAGS, k=rng.randint(0, 2)),
            "events": [
                {"action": rng.choice(_ACTIONS), "amount": round(rng.uniform(1, 500), 2)}
                for _ in range(rng.randint(0, 2))
            ],
            "created_at": created.strftime("%Y-%m-%dT%H:%M:%SZ"),
            # Mostly numeric, sometimes text: the column is downgraded to string.
            "score": rng.randint(0, 100) if rng.random() < 0.8 else f"{rng.randint(0, 100)}pts",
        }
        if rng.random() < 0.3:
            doc["meta"] = {}
        if rng.random() < 0.5:
            doc["referrer"] = rng.choice(["ads", "search", "direct"])
        documents.append(doc)
    return documents


@app.command()
def main(
    count: int = typer.Option(
        20,
        "--count",
        "-n",
        help="Number of top-level documents to generate.",
    ),
    seed: int = typer.Option(
        42,
        "--seed",
        help="Deterministic RNG seed.",
    ),
    output: Path | None = typer.Option(
        None,
        "--output",
        "-o",
        help="Output path (stdout when omitted).",
    ),
) -> None:
    """
    Generate sample documents as one JSON array.
    """
    start = time.perf_counter()
    documents = _generate_documents(count, seed)
    text = json.dumps(documents, indent=2)

    if output is None:
        typer.echo(text)
        return

    output.parent.mkdir(parents=True, exist_ok=True)
    output.write_text(text, encoding="utf-8")
    typer.echo(
        f"Wrote {count:,} document(s) -> {output} in {time.perf_counter() - start:.2f}s (seed={seed})",
        err=True,
    )


if __name__ == "__main__":
    try:
        app()
    except KeyboardInterrupt:
        typer.echo("Cancelled by user.", err=True)
        sys.exit(130)
