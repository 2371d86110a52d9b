"""cindex CLI - prepares the trigram index for the query tool."""

import click

from csindex import __version__
from csindex.config_runtime import load_runtime_config, locate_default_index_file
from csindex.indexer.runner import list_roots, run_repository_index
from csindex.ui import print_success
from csindex.utils.error_handler import handle_exceptions
from csindex.utils.logging import set_console_level


@click.command(context_settings={"help_option_names": ["-h", "--help"]})
@click.version_option(version=__version__, prog_name="cindex")
@handle_exceptions
@click.option("--list", "list_flag", is_flag=True, help="List indexed paths and exit")
@click.option("--reset", is_flag=True, help="Discard existing index")
@click.option("--verbose", "-v", is_flag=True, help="Print extra information")
@click.option(
    "--encodings",
    default="",
    metavar="NAMES",
    help="Candidate encodings - comma separated list (e.g. utf-8,iso8859-2)",
)
@click.option(
    "--index",
    "index_path",
    envvar="CSEARCHINDEX",
    default=None,
    type=click.Path(dir_okay=False),
    help="Index file (default: $CSEARCHINDEX, else ~/.csearchindex)",
)
@click.argument("paths", nargs=-1, type=click.Path())
def cindex(list_flag, reset, verbose, encodings, index_path, paths):
    """Prepare the trigram index for use by the search tool.

    \b
    The simplest invocation is
      cindex PATH...
    which adds the file or directory tree named by each PATH to the index.
    For example:
      cindex $HOME/src /usr/include
    or, equivalently:
      cindex $HOME/src
      cindex /usr/include

    If cindex is invoked with no paths, it reindexes the paths that have
    already been added, in case the files have changed. Thus, 'cindex' by
    itself is a useful command to run in a nightly cron job.

    By default cindex adds the named paths to the index but preserves
    information about other paths that might already be indexed (the ones
    printed by cindex --list). The --reset flag causes cindex to delete the
    existing index before indexing the new paths. With no path arguments,
    cindex --reset removes the index.

    Files and directories whose names start with '.', '#' or '~', or end
    with '~', are skipped.
    """
    config = load_runtime_config()
    if index_path is None:
        index_path = locate_default_index_file(config)

    if list_flag:
        for root in list_roots(index_path):
            click.echo(root)
        return

    if verbose:
        set_console_level("DEBUG")

    result = run_repository_index(
        paths=list(paths),
        index_path=index_path,
        reset=reset,
        verbose=verbose,
        encodings=encodings,
        limits=config["limits"],
    )

    if result["mode"] == "reset":
        print_success(f"removed {index_path}")
        return
    stats = result["stats"]
    print_success(
        f"{stats.files_added} file(s) indexed under {len(result['roots'])} root(s) "
        f"({result['mode']}) -> {index_path}"
    )


def main():
    """Console script entry point."""
    cindex()


if __name__ == "__main__":
    main()
