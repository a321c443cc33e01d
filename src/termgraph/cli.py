from __future__ import annotations

from pathlib import Path
from typing import Iterable

import typer
from rich.console import Console
from rich.progress import BarColumn, Progress, TextColumn
from rich.table import Table
from rich.text import Text

from .config import Settings
from .document_graph import DocumentGraph
from .errors import StoreError


app = typer.Typer(add_completion=False, help="Term cooccurrence graph: tf-idf search and document similarity.")
console = Console()

SUPPORTED_TEXT_EXTS = {".md", ".markdown", ".txt"}


def iter_files(root: Path) -> Iterable[Path]:
    for p in sorted(root.rglob("*")):
        if not p.is_file():
            continue
        if p.name.startswith("."):
            continue
        if p.suffix.lower() not in SUPPORTED_TEXT_EXTS:
            continue
        yield p


def _open_graph() -> DocumentGraph:
    settings = Settings()
    try:
        return DocumentGraph.from_settings(settings)
    except StoreError as e:
        _fail(e)
        raise


def _fail(e: Exception) -> None:
    console.print(str(e), style="red")
    console.print("Run: `termgraph doctor` to check the store configuration.", style="yellow")
    raise typer.Exit(code=2)


def _preview(text: str | None, limit: int = 160) -> str:
    preview = " ".join((text or "").split())
    if len(preview) > limit:
        preview = preview[:limit].rstrip() + "..."
    return preview


@app.command()
def ingest(
    input: Path = typer.Option(..., "--input", exists=True, file_okay=False, dir_okay=True),
):
    """Ingest .txt/.md files; the document id is the path relative to --input."""
    graph = _open_graph()
    docs = 0
    nodes = 0
    try:
        for path in iter_files(input):
            doc_id = path.relative_to(input).as_posix()
            nodes += graph.ingest_document(doc_id, path.read_text(encoding="utf-8", errors="replace"))
            docs += 1
    except StoreError as e:
        _fail(e)
    finally:
        graph.close()

    console.print(f"Documents ingested: {docs}")
    console.print(f"Node occurrences recorded: {nodes}")
    console.print("Next: run `termgraph index` to compute tf-idf weights.")


@app.command()
def index(
    doc: str | None = typer.Option(None, "--doc", help="Index a single document id"),
):
    """Recompute tf-idf weights for one document or the whole corpus."""
    graph = _open_graph()
    try:
        if doc is not None:
            ok = graph.index_weights(doc)
            console.print(f"Indexed {doc}" if ok else f"Indexing {doc} was incomplete", style="green" if ok else "yellow")
            return

        with Progress(TextColumn("Indexing"), BarColumn(), TextColumn("{task.completed}/{task.total}"), console=console) as bar:
            task = bar.add_task("index", total=None)

            def on_progress(p: dict) -> None:
                bar.update(task, total=p["total"], completed=p["count"])

            summary = graph.index_all_weights(on_progress)
    except StoreError as e:
        _fail(e)
    finally:
        graph.close()

    console.print(f"Indexed {summary['count']} of {summary['total']} documents")


@app.command()
def search(
    terms: list[str] = typer.Argument(..., help="Terms ('cat') or node keys ('noun:cat')"),
    limit: int | None = typer.Option(None, "--limit", help="Per-term result limit"),
    k: int = typer.Option(10, help="Documents to show"),
):
    """Rank documents by summed tf-idf of the given terms."""
    graph = _open_graph()
    try:
        ids, scores = graph.search(terms, search_limit=limit)
        top = ids[: int(k)]
        contents = graph.get_contents(top) if top else []
    except StoreError as e:
        _fail(e)
    finally:
        graph.close()

    table = Table(title=f"Top {k} Documents")
    table.add_column("#", justify="right", width=4)
    table.add_column("score", justify="right", width=8)
    table.add_column("id")
    table.add_column("preview")

    for i, (doc_id, text) in enumerate(zip(top, contents), start=1):
        table.add_row(Text(str(i)), Text(f"{scores[doc_id]:.3f}"), Text(doc_id), Text(_preview(text)))

    console.print(table)


@app.command()
def similar(
    id1: str = typer.Argument(...),
    id2: str = typer.Argument(...),
    concepts: bool = typer.Option(False, "--concepts", help="Only compare noun/adjective terms"),
):
    """Cosine similarity between two indexed documents."""
    graph = _open_graph()
    try:
        sim = graph.concept_similarity(id1, id2) if concepts else graph.cosine_similarity(id1, id2)
    except StoreError as e:
        _fail(e)
    finally:
        graph.close()

    console.print(f"{sim:.4f}")


@app.command()
def tfidf(
    term: str = typer.Argument(..., help="Node key, e.g. noun:cat"),
    doc: str | None = typer.Option(None, "--doc", help="Relative to this document id"),
):
    """Show the tf-idf breakdown for a node key."""
    graph = _open_graph()
    try:
        result = graph.compute_tfidf(term, doc)
    except StoreError as e:
        _fail(e)
    finally:
        graph.close()

    table = Table(title=f"tf-idf {term}" + (f" in {doc}" if doc else ""))
    table.add_column("Metric")
    table.add_column("Value")
    for name, value in result.as_dict().items():
        table.add_row(name, f"{value:.4f}" if isinstance(value, float) else str(value))
    console.print(table)


@app.command("next")
def next_(
    key: str = typer.Argument(..., help="Node key, e.g. noun:cat"),
    k: int = typer.Option(10, help="Successors to show"),
):
    """Show the nodes that most often follow a node."""
    graph = _open_graph()
    try:
        rows = graph.next_keys(key, limit=k)
    except StoreError as e:
        _fail(e)
    finally:
        graph.close()

    if not rows:
        console.print("No successors recorded.", style="yellow")
        raise typer.Exit(code=2)
    for member, weight in rows:
        console.print(f"{int(weight):>6}  {member}", markup=False)


@app.command()
def show(doc_id: str = typer.Argument(...)):
    """Print the stored content of a document."""
    graph = _open_graph()
    try:
        (text,) = graph.get_contents([doc_id])
    except StoreError as e:
        _fail(e)
    finally:
        graph.close()

    if text is None:
        console.print("No such document.", style="yellow")
        raise typer.Exit(code=2)
    console.print(text, markup=False)


@app.command()
def doctor():
    """Check that the configured store is reachable and print corpus counters."""
    settings = Settings()
    console.print(f"Backend: {settings.backend}")
    if settings.backend == "sqlite":
        console.print(f"- Path: {settings.sqlite_path}")
    else:
        console.print(f"- Redis: {settings.redis_host}:{settings.redis_port}/{settings.redis_db}")

    try:
        graph = DocumentGraph.from_settings(settings)
        try:
            graph.store.ping()
            n = graph.document_count()
        finally:
            graph.close()
    except (StoreError, ValueError) as e:
        console.print(f"- Not reachable: {e}", style="red")
        raise typer.Exit(code=1)

    console.print("- Store reachable.", style="green")
    console.print(f"- Documents: {n}", style="green" if n > 0 else "yellow")


if __name__ == "__main__":
    app()
