import logging

import typer

from ide_bridge.cli.query import query_app
from ide_bridge.cli.serve import serve_app
from ide_bridge.config import load_settings

app = typer.Typer(
    name="ide-bridge",
    help="IDE Bridge CLI: serve and query live editor context.",
    no_args_is_help=True,
    context_settings={"help_option_names": ["-h", "--help"]},
)

app.add_typer(serve_app, name="serve")
app.add_typer(query_app, name="query")


@app.callback()
def configure_logging() -> None:
    """Configure logging from IDE_BRIDGE_LOG_LEVEL."""
    logging.basicConfig(
        level=load_settings().log_level.upper(),
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )


def main() -> None:
    app()
