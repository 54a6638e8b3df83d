"""CLI entry point for BlogDesk."""

import logging
from pathlib import Path

import click
from rich.console import Console
from rich.table import Table

from blogdesk.config import load_settings
from blogdesk.content.features import FeatureCatalog
from blogdesk.content.screenshots import list_screenshots_by_features, screenshot_counts
from blogdesk.errors import GenerationError, ImportFailure
from blogdesk.generate.templates import TEMPLATES
from blogdesk.keywords.classifier import AUDIENCES, CATEGORIES, INTENTS, classify
from blogdesk.keywords.csv_importer import import_from_file
from blogdesk.keywords.derive import build_keyword
from blogdesk.keywords.scoring import score_breakdown
from blogdesk.keywords.service import recalculate_all_scores
from blogdesk.search import queries
from blogdesk.search.filters import SORT_FIELDS, KeywordFilters
from blogdesk.storage.database import Database
from blogdesk.storage.repository import KeywordRepository

console = Console(force_terminal=True)


def _keyword_table(title: str, keywords) -> Table:
    table = Table(title=title)
    table.add_column("Keyword", style="cyan")
    table.add_column("Searches", justify="right")
    table.add_column("Comp.", justify="right")
    table.add_column("Category")
    table.add_column("Intent")
    table.add_column("Audience")
    table.add_column("Score", justify="right", style="bold")
    for kw in keywords:
        table.add_row(
            kw.keyword,
            "-" if kw.monthly_searches is None else f"{kw.monthly_searches:,}",
            "-" if kw.competition_index is None else str(kw.competition_index),
            kw.category or "",
            kw.intent or "",
            kw.audience or "",
            str(kw.blog_score),
        )
    return table


@click.group()
@click.option(
    "--db",
    default=None,
    help="Database path (overrides BLOGDESK_DB_PATH)",
    type=click.Path(),
)
@click.option("--verbose", "-v", is_flag=True, help="Enable debug logging")
@click.pass_context
def cli(ctx, db, verbose):
    """BlogDesk - Keyword research and blog content tooling."""
    ctx.ensure_object(dict)

    settings = load_settings()
    if db:
        settings.db_path = Path(db)
    ctx.obj["settings"] = settings
    ctx.obj["db_path"] = settings.db_path

    if verbose:
        logging.basicConfig(level=logging.DEBUG)
    else:
        logging.basicConfig(level=logging.INFO, format="%(message)s")


@cli.command()
@click.pass_context
def init(ctx):
    """Create the database and its tables."""
    db_path = ctx.obj["db_path"]
    with Database(db_path):
        pass
    console.print(f"[green]Database ready:[/green] {db_path}")


# ---------------------------------------------------------------------------
# Keyword Commands
# ---------------------------------------------------------------------------


@cli.command(name="import")
@click.argument("csv_path", type=click.Path(exists=True, dir_okay=False))
@click.pass_context
def import_cmd(ctx, csv_path):
    """Import a Google Keyword Planner export."""
    with Database(ctx.obj["db_path"]) as db:
        repo = KeywordRepository(db)
        try:
            result = import_from_file(repo, Path(csv_path))
        except ImportFailure as e:
            console.print(f"[red]Import failed:[/red] {e}")
            ctx.exit(1)

        console.print(
            f"[green]Done![/green] Imported [bold]{result.imported}[/bold] keywords, "
            f"skipped [dim]{result.skipped}[/dim]."
        )
        if result.errors:
            console.print(f"[yellow]{len(result.errors)} rows had errors:[/yellow]")
            for error in result.errors:
                console.print(f"  {error}")
        console.print(f"Total keywords in database: [bold]{repo.count()}[/bold]")


@cli.command()
@click.option("--search", "-s", help="Substring to match in the keyword text")
@click.option("--category", "-c", type=click.Choice(CATEGORIES), help="Filter by category")
@click.option("--intent", "-i", type=click.Choice(INTENTS), help="Filter by intent")
@click.option("--audience", "-a", type=click.Choice(AUDIENCES), help="Filter by audience")
@click.option("--sort", "sort_by", type=click.Choice(sorted(SORT_FIELDS)), default="monthly_searches")
@click.option("--asc", is_flag=True, help="Sort ascending")
@click.option("--limit", type=int, default=50, help="Max results")
@click.option("--offset", type=int, default=0, help="Results to skip")
@click.option("--questions", is_flag=True, help="Only question-style keywords")
@click.pass_context
def keywords(ctx, search, category, intent, audience, sort_by, asc, limit, offset, questions):
    """List keywords with filters and sorting."""
    with Database(ctx.obj["db_path"]) as db:
        if questions:
            results = queries.question_keywords(db)[offset:offset + limit]
        else:
            filters = KeywordFilters(
                search=search,
                category=category,
                intent=intent,
                audience=audience,
                sort_by=sort_by,
                sort_dir="asc" if asc else "desc",
                limit=limit,
                offset=offset,
            )
            results = queries.list_keywords_filtered(db, filters)

    if not results:
        console.print("[yellow]No keywords found.[/yellow]")
        return
    console.print(_keyword_table(f"Keywords ({len(results)})", results))


@cli.command(name="classify")
@click.argument("text")
@click.option("--searches", type=int, default=None, help="Monthly searches")
@click.option("--competition-index", type=click.IntRange(0, 100), default=None)
def classify_cmd(text, searches, competition_index):
    """Show how a keyword would be tagged and scored."""
    fields = {"keyword": text, "competition_index": competition_index}
    if searches is not None:
        fields["monthly_searches"] = searches
    record = build_keyword(fields)
    labels = classify(text)

    console.print(f"[bold]{text}[/bold]")
    console.print(f"  Category: [cyan]{record.category}[/cyan]")
    console.print(f"  Intent: [cyan]{record.intent}[/cyan]")
    console.print(f"  Audience: [cyan]{record.audience}[/cyan]")
    console.print(f"  Question: {record.is_question}")
    console.print(f"  Branded: {record.is_branded}")
    console.print(f"  Low value: {labels['is_low_value']}")

    table = Table(title="Score breakdown")
    table.add_column("Signal", style="cyan")
    table.add_column("Points", justify="right")
    for signal, points in score_breakdown(record).items():
        table.add_row(signal, str(points))
    console.print(table)
    console.print(f"Blog score: [bold]{record.blog_score}[/bold]")


@cli.command()
@click.pass_context
def stats(ctx):
    """Show keyword statistics."""
    db_path = ctx.obj["db_path"]

    if not db_path.exists():
        console.print("[yellow]No database found.[/yellow] Run 'import' first.")
        return

    with Database(db_path) as db:
        console.print(f"Total keywords: [bold]{queries.count_keywords(db)}[/bold]")
        console.print(f"Total monthly searches: [bold]{queries.total_search_volume(db):,}[/bold]")

        for title, key, rows in (
            ("By Category", "category", queries.stats_by_category(db)),
            ("By Intent", "intent", queries.stats_by_intent(db)),
            ("By Audience", "audience", queries.stats_by_audience(db)),
        ):
            if not rows:
                continue
            console.print()
            table = Table(title=title)
            table.add_column(key.title(), style="cyan")
            table.add_column("Count", justify="right")
            table.add_column("Searches", justify="right")
            if key == "audience":
                table.add_column("Avg score", justify="right")
            for r in rows:
                cells = [r[key] or "-", str(r["count"]), f"{r['total_searches']:,}"]
                if key == "audience":
                    cells.append(f"{r['avg_blog_score'] or 0:.1f}")
                table.add_row(*cells)
            console.print(table)


@cli.command()
@click.pass_context
def recalculate(ctx):
    """Recompute audience and blog score for every keyword."""
    with Database(ctx.obj["db_path"]) as db:
        changed = recalculate_all_scores(KeywordRepository(db))
    console.print(f"[green]Recalculated.[/green] {changed} keywords changed.")


@cli.command()
@click.option("--limit", type=int, default=20, help="Max topics")
@click.option("--by-audience", is_flag=True, help="Group the best topics by audience")
@click.option("--per-audience", type=int, default=5, help="Topics per audience")
@click.pass_context
def topics(ctx, limit, by_audience, per_audience):
    """Suggest blog topics from the best-scoring keywords."""
    with Database(ctx.obj["db_path"]) as db:
        if by_audience:
            grouped = queries.blog_topics_by_audience(db, per_audience)
            if not grouped:
                console.print("[yellow]No blog topics found.[/yellow]")
                return
            for audience, kws in grouped.items():
                console.print(_keyword_table(audience, kws))
            return

        results = queries.blog_topic_keywords(db, limit)

    if not results:
        console.print("[yellow]No blog topics found.[/yellow]")
        return
    console.print(_keyword_table("Blog Topics", results))


@cli.command(name="export")
@click.option(
    "--output", "-o",
    default=None,
    type=click.Path(),
    help="Output directory",
)
@click.pass_context
def export_cmd(ctx, output):
    """Export keywords as JSON files."""
    from blogdesk.storage.export import export_keywords

    settings = ctx.obj["settings"]
    output_dir = Path(output) if output else settings.exports_dir

    with Database(ctx.obj["db_path"]) as db:
        summary = export_keywords(db, output_dir)

    console.print(f"[green]Exported {summary['total']} keywords to {output_dir}[/green]")
    console.print(f"  By category: {summary['by_category']}")


# ---------------------------------------------------------------------------
# Content Commands
# ---------------------------------------------------------------------------


@cli.command()
@click.option("--file", "features_file", type=click.Path(), default=None, help="Features JSON file")
@click.option("--show", "show_key", default=None, help="Print the prompt text for one feature")
@click.pass_context
def features(ctx, features_file, show_key):
    """List product features and their screenshot counts."""
    settings = ctx.obj["settings"]
    catalog = FeatureCatalog(Path(features_file) if features_file else settings.features_file)

    with Database(ctx.obj["db_path"]) as db:
        if show_key:
            shots = list_screenshots_by_features(db, [show_key]).get(show_key, [])
            text = catalog.format_for_prompt(show_key, shots)
            if text is None:
                console.print(f"[red]Unknown feature:[/red] {show_key}")
                ctx.exit(1)
            console.print(text, markup=False)
            return
        counts = screenshot_counts(db)

    options = catalog.options()
    if not options:
        console.print("[yellow]No features defined.[/yellow]")
        return

    table = Table(title="Product Features")
    table.add_column("Key", style="cyan")
    table.add_column("Name", style="bold")
    table.add_column("Label")
    table.add_column("Screenshots", justify="right")
    for name, key, label in options:
        table.add_row(key, name, label, str(counts.get(key, 0)))
    console.print(table)


@cli.command()
@click.option("--topic", "-t", required=True, help="What the post is about")
@click.option(
    "--template", "template_name",
    type=click.Choice(list(TEMPLATES)),
    default="how_to",
    help="Post template",
)
@click.option("--tone", default="professional", help="Writing tone")
@click.option("--length", type=click.Choice(["short", "medium", "long"]), default="medium")
@click.option("--audience", default=None, help="Target audience description")
@click.option("--keyword", "-k", "keyword_list", multiple=True, help="Keyword to work in")
@click.option("--feature", "-f", "feature_keys", multiple=True, help="Feature key to highlight")
@click.option("--save", type=click.Path(), default=None, help="Write the markdown to a file")
@click.pass_context
def generate(ctx, topic, template_name, tone, length, audience, keyword_list, feature_keys, save):
    """Generate a blog post draft with Claude."""
    from blogdesk.generate.blog_post import DEFAULT_AUDIENCE, generate_blog_post
    from blogdesk.llm.client import create_client

    settings = ctx.obj["settings"]
    feature_texts = []
    if feature_keys:
        catalog = FeatureCatalog(settings.features_file)
        with Database(ctx.obj["db_path"]) as db:
            shots = list_screenshots_by_features(db, list(feature_keys))
        feature_texts = catalog.format_many_for_prompt(list(feature_keys), shots)

    try:
        llm = create_client(settings)
        post = generate_blog_post(
            topic,
            template_name,
            llm,
            tone=tone,
            length=length,
            audience=audience or DEFAULT_AUDIENCE,
            keywords=list(keyword_list),
            features=feature_texts,
            max_tokens=settings.anthropic_max_tokens,
        )
    except GenerationError as e:
        console.print(f"[red]Generation failed:[/red] {e}")
        ctx.exit(1)

    console.print(f"[bold]{post.title}[/bold]")
    console.print(f"[dim]{post.excerpt}[/dim]")
    console.print()
    console.print(post.content, markup=False)

    if save:
        Path(save).write_text(f"# {post.title}\n\n{post.content}\n")
        console.print(f"[green]Saved to:[/green] {save}")


if __name__ == "__main__":
    cli()
