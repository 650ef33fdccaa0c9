"""Command-line interface for Novel Graph Analyzer."""

import json
import logging
from collections import Counter
from pathlib import Path

import click
from rich.console import Console
from rich.logging import RichHandler
from rich.progress import BarColumn, Progress, SpinnerColumn, TaskProgressColumn, TextColumn
from rich.table import Table

from novel_graph_analyzer import __version__
from novel_graph_analyzer.errors import NovelAnalysisError

console = Console()


def _configure_logging(verbose: bool) -> None:
    logging.basicConfig(
        level=logging.DEBUG if verbose else logging.WARNING,
        format="%(message)s",
        datefmt="[%X]",
        handlers=[RichHandler(console=console, rich_tracebacks=True)],
    )


def _load(path: str, mime: str | None = None) -> str:
    """Decode a manuscript, turning domain errors into a CLI failure."""
    from novel_graph_analyzer.config import get_settings
    from novel_graph_analyzer.ingest.loader import decode

    try:
        with console.status("Loading text..."):
            text = decode(Path(path), mime_type=mime, max_size=get_settings().max_file_size)
    except NovelAnalysisError as e:
        console.print(f"[red]✗[/red] {e.message}")
        raise SystemExit(1) from e

    console.print(f"[green]✓[/green] Loaded {len(text):,} characters")
    return text


@click.group()
@click.version_option(version=__version__)
@click.option("--verbose", "-v", is_flag=True, help="Show debug logging")
def main(verbose: bool) -> None:
    """Novel Graph Analyzer - Turn Chinese fiction into knowledge graphs and timelines."""
    _configure_logging(verbose)


@main.command()
def status() -> None:
    """Check system status (settings, Neo4j connection)."""
    from novel_graph_analyzer.config import get_settings
    from novel_graph_analyzer.graph.connection import check_neo4j_connection

    console.print("[bold]Novel Graph Analyzer Status[/bold]\n")

    settings = get_settings()
    table = Table(title="Settings")
    table.add_column("Setting", style="cyan")
    table.add_column("Value", style="green")
    table.add_row("Data directory", str(settings.data_dir))
    table.add_row("Max file size", f"{settings.max_file_size:,} bytes")
    table.add_row("Co-occurrence window", str(settings.cooccurrence_window))
    table.add_row("Min relation confidence", str(settings.min_relation_confidence))
    console.print(table)

    console.print(f"\nNeo4j URI: {settings.neo4j_uri}")
    if check_neo4j_connection():
        console.print("[green]✓[/green] Neo4j connected")
    else:
        console.print("[red]✗[/red] Neo4j not reachable")


@main.command()
@click.argument("path", type=click.Path(exists=True))
@click.option("--mime", "-m", help="MIME type (guessed from the extension if not provided)")
@click.option("--output", "-o", type=click.Path(), help="Output file for results (JSON)")
@click.option("--export", is_flag=True, help="Save results (JSON) to the exports directory")
@click.option("--write-graph", is_flag=True, help="Persist entities and relations to Neo4j")
def analyze(path: str, mime: str | None, output: str | None, export: bool, write_graph: bool) -> None:
    """Run the full analysis pipeline on a manuscript."""
    from novel_graph_analyzer.config import get_settings
    from novel_graph_analyzer.pipeline import NovelAnalyzer

    text = _load(path, mime)
    analyzer = NovelAnalyzer()

    with Progress(
        SpinnerColumn(),
        TextColumn("[progress.description]{task.description}"),
        BarColumn(),
        TaskProgressColumn(),
        console=console,
    ) as progress:
        task = progress.add_task("Analyzing...", total=None)

        def progress_callback(stage: str, current: int, total: int) -> None:
            progress.update(task, description=f"Stage: {stage}", completed=current - 1, total=total)

        try:
            result = analyzer.analyze(text, progress_callback=progress_callback)
        except NovelAnalysisError as e:
            console.print(f"[red]✗[/red] {e.message}")
            raise SystemExit(1) from e
        progress.update(task, completed=progress.tasks[0].total)

    console.print("\n[bold green]✓ Analysis complete![/bold green]\n")

    graph = result.knowledge_graph
    table = Table(title="Analysis Statistics")
    table.add_column("Metric", style="cyan")
    table.add_column("Value", style="green", justify="right")
    table.add_row("Total words", f"{result.total_words:,}")
    table.add_row("Chapters", f"{result.estimated_chapters:,}")
    table.add_row("Entities", f"{len(graph.entities):,}")
    table.add_row("Relations", f"{len(graph.relations):,}")
    table.add_row("Pronoun references", f"{len(graph.references):,}")
    table.add_row("Events", f"{len(result.timeline.events):,}")
    table.add_row("Causal relations", f"{len(result.timeline.causal_relations):,}")
    table.add_row("Thematic clusters", f"{len(result.semantic_analysis.thematic_clusters):,}")
    console.print(table)

    by_type = Counter(e.type.value for e in graph.entities)
    if by_type:
        console.print("\n[bold]Entities by type:[/bold]")
        for etype, count in by_type.most_common():
            console.print(f"  {etype}: {count:,}")

    console.print(f"\n[bold]Summary:[/bold] {result.summary}")

    if export and not output:
        output = str(get_settings().exports_dir / f"{Path(path).stem}.json")

    if output:
        output_path = Path(output)
        output_path.parent.mkdir(parents=True, exist_ok=True)
        with open(output_path, "w", encoding="utf-8") as f:
            json.dump(result.to_dict(), f, ensure_ascii=False, indent=2)
        console.print(f"\n[green]✓[/green] Results saved to {output_path}")

    if write_graph:
        from novel_graph_analyzer.graph.writer import GraphWriter

        writer = GraphWriter()
        try:
            with console.status("Writing to Neo4j..."):
                nodes, edges = writer.write_analysis(result)
        except ConnectionError as e:
            console.print(f"[red]✗[/red] {e}")
            raise SystemExit(1) from e
        finally:
            writer.close()
        console.print(f"[green]✓[/green] Wrote {nodes:,} nodes and {edges:,} relationships")


# ============================================================================
# Extract Commands
# ============================================================================

@main.group()
def extract() -> None:
    """Entity and relation extraction commands."""
    pass


@extract.command(name="entities")
@click.argument("path", type=click.Path(exists=True))
@click.option("--quick", is_flag=True, help="Use the lightweight recognizer (characters and places only)")
def extract_entities(path: str, quick: bool) -> None:
    """Recognize and resolve entities in a manuscript."""
    from novel_graph_analyzer.extract import EntityRecognizer, EntityResolver

    text = _load(path)
    recognizer = EntityRecognizer()

    with console.status("Extracting entities..."):
        if quick:
            entities = recognizer.quick_extract(text)
        else:
            entities = EntityResolver().resolve(recognizer.recognize(text), text)

    table = Table(title=f"Entities ({len(entities)})")
    table.add_column("Name", style="cyan")
    table.add_column("Type", style="magenta")
    table.add_column("Id")
    table.add_column("Frequency", justify="right", style="green")
    table.add_column("Aliases", style="dim")

    for entity in entities:
        table.add_row(
            entity.name,
            entity.type.value,
            entity.disambiguated_id or "",
            str(entity.attributes.frequency),
            ", ".join(entity.aliases[:3]),
        )

    console.print(table)


@extract.command(name="relations")
@click.argument("path", type=click.Path(exists=True))
def extract_relations(path: str) -> None:
    """Extract relations between resolved entities."""
    from novel_graph_analyzer.extract import EntityRecognizer, EntityResolver, RelationExtractor

    text = _load(path)

    with console.status("Extracting relations..."):
        entities = EntityResolver().resolve(EntityRecognizer().recognize(text), text)
        relations = RelationExtractor().extract(entities, text)

    console.print(f"[green]✓[/green] {len(entities):,} entities, {len(relations):,} relations\n")

    table = Table(title="Relations")
    table.add_column("Source", style="cyan")
    table.add_column("Type", style="magenta")
    table.add_column("Target", style="cyan")
    table.add_column("Confidence", justify="right", style="green")

    for relation in relations:
        table.add_row(relation.source, relation.type.value, relation.target, f"{relation.confidence:.2f}")

    console.print(table)


# ============================================================================
# Timeline Commands
# ============================================================================

@main.command()
@click.argument("path", type=click.Path(exists=True))
def timeline(path: str) -> None:
    """Show the ordered event timeline and causal links."""
    from novel_graph_analyzer.pipeline import NovelAnalyzer

    text = _load(path)

    with console.status("Building timeline..."):
        try:
            result = NovelAnalyzer().analyze(text)
        except NovelAnalysisError as e:
            console.print(f"[red]✗[/red] {e.message}")
            raise SystemExit(1) from e

    events = result.timeline.events
    table = Table(title=f"Timeline ({len(events)} events)")
    table.add_column("#", justify="right", style="dim")
    table.add_column("Time", style="yellow")
    table.add_column("Event", style="cyan")
    table.add_column("Participants")
    table.add_column("Sentiment", style="magenta")

    for event in events:
        table.add_row(
            str(event.order),
            event.time_info.expression if event.time_info else "",
            event.label,
            ", ".join(event.participants),
            event.sentiment.sentiment if event.sentiment else "",
        )

    console.print(table)

    causal = result.timeline.causal_relations
    if causal:
        console.print("\n[bold]Causal relations:[/bold]")
        for relation in causal:
            console.print(
                f"  {relation.cause.label[:20]} -> {relation.effect.label[:20]} ({relation.confidence:.2f})"
            )
            for basis in relation.basis:
                console.print(f"    [dim]{basis}[/dim]")


@main.command()
@click.argument("path", type=click.Path(exists=True))
@click.option("--max-length", "-l", type=int, help="Maximum summary length in characters")
def summary(path: str, max_length: int | None) -> None:
    """Print the chapter outline and a leading summary."""
    from novel_graph_analyzer.config import get_settings
    from novel_graph_analyzer.ingest.splitter import count_words, generate_summary, split_into_chapters

    settings = get_settings()
    text = _load(path)
    chapters = split_into_chapters(
        text,
        words_per_chapter=settings.words_per_chapter,
        single_chapter_threshold=settings.single_chapter_word_threshold,
        min_paragraphs=settings.min_paragraphs_for_split,
    )

    console.print(f"[bold]Words:[/bold] {count_words(text):,}")
    console.print(f"[bold]Chapters:[/bold] {len(chapters):,}")
    for chapter in chapters[:20]:
        console.print(f"  [dim]{chapter.order}.[/dim] {chapter.title}")
    if len(chapters) > 20:
        console.print(f"  [dim]... {len(chapters) - 20} more[/dim]")

    console.print(f"\n[bold]Summary:[/bold] {generate_summary(text, max_length or settings.summary_max_length)}")


if __name__ == "__main__":
    main()
