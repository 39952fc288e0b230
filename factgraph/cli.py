#!/usr/bin/env python3
"""
factgraph CLI - command-line interface over fact files and stores.

Usage:
    factgraph show facts.txt
    factgraph tree facts.txt "/person<alice>" --max-depth 3
    factgraph subtract a.txt b.txt -o diff.txt
    factgraph intersect a.txt b.txt
    factgraph --db graphs.db load facts.txt family
    factgraph --db graphs.db dump family
    factgraph --db graphs.db graphs
"""

import logging
from pathlib import Path
from typing import Optional

import click
from rich.console import Console
from rich.table import Table
from rich.text import Text
from rich.tree import Tree

from factgraph.core import FactStore, MemoryStore, Predicate, SQLiteStore, parse_node
from factgraph.errors import FactgraphError
from factgraph.graph import Graph
from factgraph.algebra import intersect_report, subtract as subtract_graphs


# Global console for rich output
console = Console()
err_console = Console(stderr=True)


def get_store(db_path: Optional[str] = None) -> FactStore:
    """Open the configured store: SQLite when a path is given, in-memory otherwise."""
    if db_path:
        path = Path(db_path)
        path.parent.mkdir(parents=True, exist_ok=True)
        store = SQLiteStore(str(path))
    else:
        store = MemoryStore()
    store.initialize()
    return store


def load_file(path: str, store: FactStore, name: Optional[str] = None) -> Graph:
    """Load a fact file, turning failures into CLI errors."""
    try:
        return Graph.from_file(path, name=name, store=store)
    except OSError as e:
        raise click.FileError(path, hint=e.strerror or str(e))
    except FactgraphError as e:
        raise click.ClickException(f"{path}: {e}")


def emit(data: bytes, output: Optional[str]) -> None:
    """Write canonical output to a file or stdout."""
    if output:
        Path(output).write_bytes(data)
        console.print(f"✓ Wrote {output}", style="dim")
    elif data:
        click.echo(data.decode("utf-8"))


def print_version(ctx, param, value):
    """Print version and exit."""
    if not value or ctx.resilient_parsing:
        return
    from factgraph import __version__
    click.echo(f"factgraph {__version__}")
    ctx.exit()


@click.group()
@click.option("--version", "-V", is_flag=True, callback=print_version, expose_value=False, is_eager=True, help="Show version and exit")
@click.option("--db", envvar="FACTGRAPH_DB", help="SQLite database for load/dump/graphs (default: in-memory)")
@click.option("--verbose", "-v", is_flag=True, help="Debug logging")
@click.pass_context
def cli(ctx, db, verbose):
    """factgraph - Graph algebra over a triple store."""
    if verbose:
        logging.basicConfig(level=logging.DEBUG, format="%(levelname)s %(name)s: %(message)s")
    ctx.ensure_object(dict)
    ctx.obj["db"] = db


@cli.command()
@click.argument("path", type=click.Path(dir_okay=False))
def show(path):
    """Print a fact file in canonical (sorted) form.

    Example:
        factgraph show facts.txt
    """
    g = load_file(path, MemoryStore())
    emit(g.marshal(), None)


@cli.command()
@click.argument("path", type=click.Path(dir_okay=False))
@click.argument("root")
@click.option("--relation", "-r", default="parent_of", help="Predicate to follow (default: parent_of)")
@click.option("--max-depth", "-d", type=int, default=None, help="Stop descending below this depth")
def tree(path, root, relation, max_depth):
    """Show the hierarchy below ROOT, depth-first.

    ROOT is a node such as "/person<alice>".

    Example:
        factgraph tree family.txt "/person<alice>"
    """
    g = load_file(path, MemoryStore())
    try:
        root_node = parse_node(root)
    except FactgraphError as e:
        raise click.BadParameter(str(e), param_hint="ROOT")

    rendered: Optional[Tree] = None
    # branches[d] is the tree element of the most recent node at depth d
    branches: list[Tree] = []

    def add(node, depth):
        nonlocal rendered
        label = Text(str(node))
        if rendered is None:
            rendered = Tree(label)
            branches[:] = [rendered]
            return
        del branches[depth:]
        branches.append(branches[depth - 1].add(label))

    try:
        g.visit_depth_first(root_node, add, relation=Predicate(relation), max_depth=max_depth)
    except FactgraphError as e:
        raise click.ClickException(str(e))

    console.print(rendered)


@cli.command()
@click.argument("a", type=click.Path(dir_okay=False))
@click.argument("b", type=click.Path(dir_okay=False))
@click.option("--output", "-o", type=click.Path(dir_okay=False), help="Write result here instead of stdout")
def subtract(a, b, output):
    """Facts in A that are not in B.

    Example:
        factgraph subtract before.txt after.txt -o removed.txt
    """
    store = MemoryStore()
    result = subtract_graphs(load_file(a, store), load_file(b, store))
    emit(result.marshal(), output)


@cli.command()
@click.argument("a", type=click.Path(dir_okay=False))
@click.argument("b", type=click.Path(dir_okay=False))
@click.option("--output", "-o", type=click.Path(dir_okay=False), help="Write result here instead of stdout")
def intersect(a, b, output):
    """Facts present in both A and B.

    Example:
        factgraph intersect ours.txt theirs.txt
    """
    store = MemoryStore()
    result = intersect_report(load_file(a, store), load_file(b, store))
    for skipped in result.skipped:
        err_console.print(f"⚠ skipped {skipped.triple}: {skipped.error}", style="yellow", markup=False)
    emit(result.graph.marshal(), output)


@cli.command()
@click.argument("path", type=click.Path(dir_okay=False))
@click.argument("name")
@click.pass_context
def load(ctx, path, name):
    """Load a fact file into the store as graph NAME.

    Example:
        factgraph --db graphs.db load family.txt family
    """
    store = get_store(ctx.obj.get("db"))
    try:
        existed = name in store.graph_names()
        try:
            g = load_file(path, store, name)
        except click.ClickException:
            # Don't leave a half-loaded graph behind
            if not existed and name in store.graph_names():
                store.delete_graph(name)
            raise
        console.print(f"✓ Loaded [bold]{len(g)}[/bold] facts into {name}", highlight=False)
    except FactgraphError as e:
        raise click.ClickException(str(e))
    finally:
        store.close()


@cli.command()
@click.argument("name")
@click.option("--output", "-o", type=click.Path(dir_okay=False), help="Write result here instead of stdout")
@click.pass_context
def dump(ctx, name, output):
    """Print stored graph NAME in canonical form.

    Example:
        factgraph --db graphs.db dump family
    """
    store = get_store(ctx.obj.get("db"))
    try:
        g = Graph.open(name, store)
        emit(g.marshal(), output)
    except FactgraphError as e:
        raise click.ClickException(str(e))
    finally:
        store.close()


@cli.command()
@click.pass_context
def graphs(ctx):
    """List stored graphs and their sizes."""
    store = get_store(ctx.obj.get("db"))
    try:
        names = store.graph_names()
        if not names:
            console.print("No graphs found.", style="dim")
            return

        table = Table(show_header=True, header_style="bold")
        table.add_column("Name", style="cyan")
        table.add_column("Facts", justify="right")
        for name in names:
            table.add_row(name, str(len(Graph.open(name, store))))
        console.print(table)
    except FactgraphError as e:
        raise click.ClickException(str(e))
    finally:
        store.close()


def main():
    cli()


if __name__ == "__main__":
    main()
