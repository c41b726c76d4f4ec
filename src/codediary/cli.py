import typer
from importlib.metadata import PackageNotFoundError, version
from typing import Optional

from codediary.DIARY.diary_app import diary_app

app = typer.Typer(help="A small command-line diary for your coding days.")
app.add_typer(diary_app, name="diary", help="Add, list, view and delete diary entries.")


def get_version() -> str:
    try:
        return version("code-diary")
    except PackageNotFoundError:
        return "unknown"


def version_callback(value: bool):
    if value:
        typer.echo(f"code-diary {get_version()}")
        raise typer.Exit()


@app.callback()
def main_callback(
    show_version: Optional[bool] = typer.Option(None, "--version", callback=version_callback, is_eager=True,
        help="Show the version and exit."
    ),
):
    pass


if __name__ == "__main__":
    app()
