import asyncio
import sys
from pathlib import Path

import click
from rich.console import Console
from rich.markup import escape
from rich.progress import BarColumn, Progress, SpinnerColumn, TaskProgressColumn, TextColumn
from rich.table import Table
from rich.tree import Tree

from . import __version__
from .config import Config
from .errors import NovelArchitectError
from .models.story import Story, StoryBible
from .pipeline import Pipeline, StorySession
from .utils.logger import setup_logger

console = Console()


def _read_idea(idea: str) -> str:
    if idea == "-":
        return sys.stdin.read()
    if idea.startswith("@"):
        try:
            return Path(idea[1:]).read_text(encoding="utf-8")
        except OSError as e:
            raise click.BadParameter(f"cannot read {idea[1:]}: {e.strerror}", param_hint="IDEA") from e
    return idea


def _bible_table(bible: StoryBible) -> Table:
    table = Table(title=escape(bible.title), show_header=False)
    table.add_column("Field", style="bold cyan")
    table.add_column("Value")
    table.add_row("Genre", escape(", ".join(bible.genre)) or "-")
    table.add_row("Setting", escape(bible.setting))
    table.add_row("Themes", escape(", ".join(bible.theme)) or "-")
    table.add_row("Synopsis", escape(bible.synopsis))
    for c in bible.characters:
        table.add_row(escape(f"{c.name} ({c.role})"), escape(c.description))
    return table


def _outline_tree(story: Story) -> Tree:
    root = Tree(f"[bold]{escape(story.bible.title)}[/bold]")
    for ch in story.chapters:
        ch_node = root.add(f"Chapter {ch.number}: {escape(ch.title)} [dim]{ch.id}[/dim]")
        for p in ch.parts:
            p_node = ch_node.add(f"Part {p.number}: {escape(p.summary)} [dim]{p.id}[/dim]")
            for s in p.sections:
                mark = "[green]✓[/green]" if s.is_written else "[grey50]·[/grey50]"
                p_node.add(f"{mark} Section {s.number}: {escape(s.summary)} [dim]{s.id}[/dim]")
    return root


def story_to_text(story: Story) -> str:
    """Plain-text manuscript of every written section."""
    lines = [story.bible.title, ""]
    for ch in story.chapters:
        lines += [f"Chapter {ch.number}: {ch.title}", ""]
        for p in ch.parts:
            for s in p.sections:
                if s.content:
                    lines += [s.content, ""]
    return "\n".join(lines).rstrip() + "\n"


@click.group()
@click.option('--config', '-c', type=click.Path(dir_okay=False), default='config.yaml',
              help='Path to configuration file')
@click.option('--verbose', '-v', is_flag=True, help='Enable verbose logging')
@click.pass_context
def cli(ctx: click.Context, config: str, verbose: bool):
    """Novel Architect - turn a story idea into a structured, written novel."""
    ctx.ensure_object(dict)

    config_path = Path(config)
    if config_path.exists():
        ctx.obj['config'] = Config.from_yaml(config_path)
    else:
        ctx.obj['config'] = Config()

    log_level = "DEBUG" if verbose else ctx.obj['config'].log_level
    logger = setup_logger(log_level)
    ctx.obj['logger'] = logger

    logger.debug(f"Novel Architect v{__version__}")
    if config_path.exists():
        logger.info(f"Config loaded from: {config_path}")


@cli.command()
@click.argument('idea')
@click.pass_context
def analyze(ctx: click.Context, idea: str):
    """Extract the story bible from IDEA ('-' for stdin, '@file' for a file)."""
    logger = ctx.obj['logger']
    session = StorySession(Pipeline(ctx.obj['config']))

    try:
        story = asyncio.run(session.analyze(_read_idea(idea)))
    except NovelArchitectError as e:
        logger.error(f"Analysis failed: {e}")
        raise click.ClickException(str(e))

    console.print(_bible_table(story.bible))


@cli.command()
@click.argument('idea')
@click.pass_context
def outline(ctx: click.Context, idea: str):
    """Extract the bible and build the chapter/part/section outline."""
    logger = ctx.obj['logger']
    session = StorySession(Pipeline(ctx.obj['config']))

    async def _run():
        await session.analyze(_read_idea(idea))
        return await session.build_structure()

    try:
        story = asyncio.run(_run())
    except NovelArchitectError as e:
        logger.error(f"Outline failed: {e}")
        raise click.ClickException(str(e))

    console.print(_outline_tree(story))


@cli.command()
@click.argument('idea')
@click.option('--continue-rounds', type=int, default=0, show_default=True,
              help='Continuations to append after each drafted section')
@click.option('--output', '-o', type=click.Path(dir_okay=False), help='Write the manuscript here')
@click.pass_context
def draft(ctx: click.Context, idea: str, continue_rounds: int, output: str):
    """Analyze, outline and write every section of the story."""
    logger = ctx.obj['logger']
    session = StorySession(Pipeline(ctx.obj['config']))

    progress = Progress(
        SpinnerColumn(),
        TextColumn("[progress.description]{task.description}"),
        BarColumn(),
        TaskProgressColumn(),
        console=Console(stderr=True),
    )

    async def _run():
        await session.analyze(_read_idea(idea))
        await session.build_structure()
        with progress:
            task_id = progress.add_task("Writing...", total=None)

            def _report(msg: str, done: int, total: int) -> None:
                progress.update(task_id, description=msg, completed=done, total=total)

            return await session.write_all(continue_rounds=continue_rounds, progress=_report)

    try:
        story = asyncio.run(_run())
    except NovelArchitectError as e:
        logger.error(f"Draft failed: {e}")
        raise click.ClickException(str(e))

    text = story_to_text(story)
    if output:
        Path(output).write_text(text, encoding="utf-8")
        written, total = story.progress
        logger.success(f"Wrote {written}/{total} sections to {output}")
    else:
        click.echo(text)


def main():
    cli()


if __name__ == '__main__':
    main()
