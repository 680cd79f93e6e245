"""CLI entrypoint: Typer app definition and command registration"""

import typer

from postpress.cli.commands import build_cmd, check_cmd, init_cmd, meta_cmd, render_cmd


app = typer.Typer(name="postpress", no_args_is_help=True, help="Front matter + Markdown rendering for article sources")

app.command(name="build")(build_cmd)
app.command(name="render")(render_cmd)
app.command(name="meta")(meta_cmd)
app.command(name="check")(check_cmd)
app.command(name="init")(init_cmd)
