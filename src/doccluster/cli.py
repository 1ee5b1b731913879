"""CLI entry point for doccluster."""

import json
import logging
from pathlib import Path

import click
import yaml
from rich.console import Console
from rich.logging import RichHandler
from rich.markup import escape
from rich.table import Table

from .config import load_config

console = Console()


@click.group()
@click.option("--config", "-c", "config_path", default=None, help="Path to config file")
@click.option("--verbose", "-v", is_flag=True, help="Show debug logging")
@click.pass_context
def cli(ctx, config_path, verbose):
    """doccluster - Cluster, compare and summarize a tenant's documents."""
    ctx.ensure_object(dict)
    ctx.obj["config_path"] = config_path
    logging.basicConfig(
        level=logging.DEBUG if verbose else logging.WARNING,
        format="%(message)s",
        handlers=[RichHandler(console=Console(stderr=True), show_path=False)],
        force=True,
    )


def _get_config(ctx) -> dict:
    return load_config(ctx.obj.get("config_path"))


def _get_store(config: dict):
    from .storage import get_document_store
    return get_document_store(config)


@cli.command()
@click.argument("path", type=click.Path(exists=True, dir_okay=False, path_type=Path))
@click.pass_context
def load(ctx, path):
    """Load chunk records from a JSON or YAML file into the store."""
    from .embeddings.embedder import Embedder
    from .storage import chunk_from_record

    config = _get_config(ctx)
    text = path.read_text(encoding="utf-8")
    records = yaml.safe_load(text) if path.suffix in (".yaml", ".yml") else json.loads(text)
    if isinstance(records, dict):
        records = records.get("chunks", [])

    chunks = [chunk_from_record(r) for r in records]
    if not chunks:
        console.print("[yellow]No chunks to load.[/]")
        return

    embedded = Embedder(config).embed_chunks(chunks) if any(not c.embedding for c in chunks) else 0
    _get_store(config).add_chunks(chunks)

    documents = {c.document_id for c in chunks}
    console.print(f"[green]✓ Loaded {len(chunks)} chunk(s) for {len(documents)} document(s)[/]")
    if embedded:
        console.print(f"  [dim]({embedded} chunk(s) embedded)[/]")


@cli.command()
@click.argument("tenant")
@click.option("--min-size", type=int, default=None, help="Smallest cluster kept")
@click.option("--max-clusters", type=int, default=None, help="Most clusters returned")
@click.option("--threshold", type=float, default=None, help="Minimum similarity linking two documents")
@click.option("--labels/--no-labels", default=True, help="Name clusters with Claude (default: on)")
@click.option("--save", is_flag=True, help="Replace the tenant's stored clusters with the result")
@click.pass_context
def cluster(ctx, tenant, min_size, max_clusters, threshold, labels, save):
    """Cluster a tenant's documents by embedding similarity."""
    from .clustering.engine import cluster_documents
    from .labeling import get_label_generator

    config = _get_config(ctx)
    cluster_cfg = config.get("clustering", {})
    generator = get_label_generator(config) if labels else None

    console.print(f"[blue]Clustering documents for tenant '{tenant}'...[/]")
    result = cluster_documents(
        tenant,
        _get_store(config),
        label_generator=generator,
        min_size=min_size if min_size is not None else cluster_cfg.get("min_cluster_size", 2),
        max_clusters=max_clusters if max_clusters is not None else cluster_cfg.get("max_clusters", 10),
        threshold=threshold if threshold is not None else cluster_cfg.get("similarity_threshold", 0.7),
        strategy=cluster_cfg.get("strategy", "first"),
        max_documents=cluster_cfg.get("max_documents"),
        max_summary_chars=config.get("labeling", {}).get("max_summary_chars", 200),
        persist=save,
    )

    if not result.clusters:
        console.print(f"[yellow]Not enough data yet: no clusters among {result.stats.total} document(s).[/]")
        return

    table = Table(title=f"Clusters ({result.stats.clustered_count}/{result.stats.total} documents)")
    table.add_column("#", style="dim", width=3)
    table.add_column("Name", style="cyan")
    table.add_column("Docs", justify="right")
    table.add_column("Confidence", justify="right", style="green")
    table.add_column("Keywords", max_width=40)

    for i, c in enumerate(result.clusters, 1):
        table.add_row(str(i), f"[{c.color}]{escape(c.name)}[/]", str(len(c.document_ids)),
                      f"{c.confidence:.2f}", ", ".join(c.keywords))

    console.print(table)
    if result.unclustered:
        console.print(f"  [dim]{len(result.unclustered)} document(s) unclustered[/]")
    if save:
        console.print(f"[green]✓ Saved {len(result.clusters)} cluster(s)[/]")


@cli.command()
@click.argument("document_id")
@click.option("--tenant", "-t", required=True, help="Tenant owning the document")
@click.option("--n", "-n", "limit", type=int, default=None, help="Number of results")
@click.option("--threshold", type=float, default=None, help="Minimum similarity")
@click.pass_context
def similar(ctx, document_id, tenant, limit, threshold):
    """Find documents similar to DOCUMENT_ID."""
    from .errors import NotFoundError
    from .query.similar import find_similar_documents

    config = _get_config(ctx)
    sim_cfg = config.get("similarity", {})

    try:
        results = find_similar_documents(
            document_id,
            tenant,
            _get_store(config),
            limit=limit if limit is not None else sim_cfg.get("limit", 5),
            threshold=threshold if threshold is not None else sim_cfg.get("threshold", 0.7),
        )
    except NotFoundError as e:
        console.print(f"[red]{e}[/]")
        ctx.exit(1)

    if not results:
        console.print("[yellow]No similar documents found.[/]")
        return

    table = Table(title=f"Similar to {document_id}")
    table.add_column("#", style="dim", width=3)
    table.add_column("Title", style="cyan")
    table.add_column("Document", style="dim")
    table.add_column("Score", justify="right", style="green")

    for i, r in enumerate(results, 1):
        table.add_row(str(i), escape(r.title), r.document_id, f"{r.similarity:.3f}")

    console.print(table)


@cli.command()
@click.argument("tenant")
@click.option("--max-topics", type=int, default=None, help="Most topics shown")
@click.pass_context
def topics(ctx, tenant, max_topics):
    """Show dominant topics across a tenant's documents."""
    from .query.topics import detect_topics

    config = _get_config(ctx)
    if max_topics is None:
        max_topics = config.get("topics", {}).get("max_topics", 10)

    results = detect_topics(tenant, _get_store(config), max_topics=max_topics)
    if not results:
        console.print("[yellow]Not enough data yet: no completed documents.[/]")
        return

    table = Table(title="Topics")
    table.add_column("Topic", style="cyan")
    table.add_column("Docs", justify="right")
    table.add_column("Keywords")

    for t in results:
        table.add_row(t.topic, str(t.document_count), ", ".join(t.keywords))

    console.print(table)


if __name__ == "__main__":
    cli()
