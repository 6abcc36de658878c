"""Typer CLI entrypoint for ds_redirect."""

from __future__ import annotations

import logging
import shutil
from pathlib import Path

import typer
import yaml

from ds_redirect.config import AppSettings, load_settings
from ds_redirect.errors import RedirectError
from ds_redirect.logging_utils import PACKAGE_LOGGER_NAME, configure_logging
from ds_redirect.redirect import redirect, resolve_source_folder
from ds_redirect.store import RedirectionStore
from ds_redirect.tree import find_leftover_trees

app = typer.Typer(
    add_completion=False,
    help="ds_redirect command line interface.",
    no_args_is_help=True,
)

CONFIG_FILE_OPTION = typer.Option(
    None,
    "--config-file",
    help="Optional settings YAML path.",
    exists=False,
    file_okay=True,
    dir_okay=False,
    readable=True,
)


def _load_and_optionally_configure_logger(
    config_file: Path | None,
    configure: bool,
) -> tuple[AppSettings, logging.Logger]:
    settings = load_settings(config_file=config_file)
    if configure:
        logger = configure_logging(settings.paths.logs_root / "ds_redirect.log")
    else:
        logger = logging.getLogger(PACKAGE_LOGGER_NAME)
    return settings, logger


def _pair_destinations(files: list[Path], dest: list[str] | None) -> list[tuple[str | None, Path]]:
    if dest and len(dest) != len(files):
        raise typer.BadParameter("Provide --dest once per file, or not at all.")
    aliases: list[str | None] = list(dest) if dest else [None] * len(files)
    return list(zip(aliases, files))


@app.command("show-config")
def show_config(config_file: Path | None = CONFIG_FILE_OPTION) -> None:
    """Print the effective configuration after env overrides."""

    settings, _ = _load_and_optionally_configure_logger(config_file, configure=False)
    rendered = yaml.safe_dump(settings.as_dict(), sort_keys=False)
    typer.echo(rendered)


@app.command("resolve")
def resolve(
    dataset_type: str = typer.Argument(..., help="Dataset type, e.g. Tau."),
    config_file: Path | None = CONFIG_FILE_OPTION,
) -> None:
    """Print the source folder a dataset type is read from."""

    settings, _ = _load_and_optionally_configure_logger(config_file, configure=False)
    typer.echo(str(resolve_source_folder(dataset_type, settings=settings)))


@app.command("build-tree")
def build_tree(
    dataset_type: str = typer.Argument(..., help="Dataset type whose default folder is backfilled."),
    files: list[Path] = typer.Argument(..., help="Files or folders to place in the tree."),
    dest: list[str] | None = typer.Option(
        None,
        "--dest",
        help="Relative destination per file; a trailing '/' keeps the file name.",
    ),
    link_others: bool | None = typer.Option(
        None,
        "--link-others/--no-link-others",
        help="Symlink every other entry of the default folder (default from settings).",
    ),
    config_file: Path | None = CONFIG_FILE_OPTION,
) -> None:
    """Build a permanent synthetic source folder and print its path."""

    settings, logger = _load_and_optionally_configure_logger(config_file, configure=True)
    pairs = _pair_destinations(files, dest)
    try:
        path = redirect(
            dataset_type,
            pairs,
            link_others=link_others,
            scope="global",
            settings=settings,
            store=RedirectionStore(),
            logger=logger,
        )
    except RedirectError as exc:
        raise typer.BadParameter(str(exc)) from exc
    typer.echo(str(path))


@app.command("list-trees")
def list_trees(config_file: Path | None = CONFIG_FILE_OPTION) -> None:
    """List synthetic folders left on disk by permanent redirections."""

    settings, _ = _load_and_optionally_configure_logger(config_file, configure=False)
    for path in find_leftover_trees(settings.paths.tmp_root, prefix=settings.redirect.tree_prefix):
        typer.echo(str(path))


@app.command("purge-trees")
def purge_trees(
    dry_run: bool = typer.Option(
        False,
        "--dry-run",
        help="Only list the folders that would be removed.",
    ),
    config_file: Path | None = CONFIG_FILE_OPTION,
) -> None:
    """Remove synthetic folders left on disk by permanent redirections."""

    settings, logger = _load_and_optionally_configure_logger(config_file, configure=not dry_run)
    leftovers = find_leftover_trees(settings.paths.tmp_root, prefix=settings.redirect.tree_prefix)
    for path in leftovers:
        if dry_run:
            typer.echo(f"would remove {path}")
            continue
        shutil.rmtree(path)
        logger.info("purge_trees.removed path=%s", path)
        typer.echo(f"removed {path}")
    logger.info("purge_trees.done count=%s dry_run=%s", len(leftovers), dry_run)


def main() -> None:
    """Console script entrypoint."""

    app()


if __name__ == "__main__":
    main()
