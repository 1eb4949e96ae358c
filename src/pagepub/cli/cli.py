"""CLI entrypoint: Typer app definition and command registration"""

import typer

from pagepub.cli.commands import all_cmd, build_cmd, resources_cmd


app = typer.Typer(name="pagepub", no_args_is_help=True, help="Markdown/HTML page build pipeline")

app.command(name="build")(build_cmd)
app.command(name="resources")(resources_cmd)
app.command(name="all")(all_cmd)
