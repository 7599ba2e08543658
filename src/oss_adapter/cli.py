"""Command-line interface for oss-adapter.

Commands:
    - ls: List a directory
    - stat: Show file metadata
    - cat: Print a file to stdout
    - put: Upload a local file
    - rm: Delete a file or directory
    - url: Print the public URL of a file
    - sign-url: Print a temporary signed URL for a file

Connection options can be given before the command or through the
OSS_ACCESS_ID, OSS_ACCESS_KEY, OSS_ENDPOINT, OSS_BUCKET, OSS_PREFIX and
OSS_CNAME environment variables.
"""

from pathlib import Path
from typing import Annotated, Optional

import typer

from . import __version__
from .adapter import OssAdapter
from .core import ValidationError
from .interface import Visibility
from .registry import create_oss_adapter
from .results import Result

app = typer.Typer(
    name="oss-adapter",
    help="Filesystem-style access to an Aliyun OSS bucket.",
    no_args_is_help=True,
)


def version_callback(value: bool) -> None:
    """Display version information."""
    if value:
        typer.echo(f"oss-adapter {__version__}")
        raise typer.Exit()


@app.callback()
def main(
    ctx: typer.Context,
    access_id: Annotated[
        Optional[str],
        typer.Option("--access-id", envvar="OSS_ACCESS_ID", help="AccessKey ID"),
    ] = None,
    access_key: Annotated[
        Optional[str],
        typer.Option("--access-key", envvar="OSS_ACCESS_KEY", help="AccessKey secret"),
    ] = None,
    endpoint: Annotated[
        Optional[str],
        typer.Option("--endpoint", envvar="OSS_ENDPOINT", help="OSS endpoint"),
    ] = None,
    bucket: Annotated[
        Optional[str],
        typer.Option("--bucket", envvar="OSS_BUCKET", help="Bucket name"),
    ] = None,
    prefix: Annotated[
        Optional[str],
        typer.Option("--prefix", envvar="OSS_PREFIX", help="Root prefix for keys"),
    ] = None,
    cname: Annotated[
        Optional[str],
        typer.Option("--cname", envvar="OSS_CNAME", help="Custom domain for URLs"),
    ] = None,
    version: Annotated[
        Optional[bool],
        typer.Option("--version", callback=version_callback, help="Show version."),
    ] = None,
) -> None:
    """
    OSS-Adapter: read, write and list an OSS bucket as a filesystem.
    """
    ctx.obj = {
        "access_id": access_id,
        "access_key": access_key,
        "endpoint": endpoint,
        "bucket": bucket,
        "prefix": prefix,
        "cname": cname,
    }


def _adapter(ctx: typer.Context) -> OssAdapter:
    config = {k: v for k, v in (ctx.obj or {}).items() if v is not None}
    try:
        return create_oss_adapter(config)
    except ValidationError as e:
        typer.echo(f"Error: {e}", err=True)
        raise typer.Exit(1)


def _unwrap(result: Result):
    if not result.ok:
        typer.echo(f"Error: {result}", err=True)
        raise typer.Exit(1)
    return result.value


@app.command("ls")
def ls_cmd(
    ctx: typer.Context,
    path: Annotated[str, typer.Argument(help="Directory to list")] = "",
    recursive: Annotated[
        bool, typer.Option("--recursive", "-r", help="Descend into subdirectories")
    ] = False,
) -> None:
    """
    List a directory.

    Examples:
        oss-adapter --bucket media ls images
        oss-adapter --bucket media ls images --recursive
    """
    entries = _unwrap(_adapter(ctx).list_contents(path, recursive))

    if not entries:
        typer.echo("No entries found.")
        return
    for entry in entries:
        if entry.is_dir:
            typer.echo(f"{'DIR':>12}  {entry.path}/")
        else:
            typer.echo(f"{entry.size:>12,}  {entry.path}")


@app.command("stat")
def stat_cmd(
    ctx: typer.Context,
    path: Annotated[str, typer.Argument(help="File to describe")],
) -> None:
    """Show file metadata."""
    metadata = _unwrap(_adapter(ctx).get_metadata(path))

    typer.echo(f"Path: {metadata.path}")
    typer.echo(f"Directory: {metadata.dirname or '/'}")
    if metadata.size is not None:
        typer.echo(f"Size: {metadata.size:,} bytes")
    else:
        typer.echo("Size: unknown")
    typer.echo(f"Type: {metadata.mimetype or 'unknown'}")
    typer.echo(f"Modified: {metadata.timestamp or 'unknown'}")


@app.command("cat")
def cat_cmd(
    ctx: typer.Context,
    path: Annotated[str, typer.Argument(help="File to print")],
) -> None:
    """Print a file to stdout."""
    contents = _unwrap(_adapter(ctx).read(path))
    typer.echo(contents, nl=False)


@app.command("put")
def put_cmd(
    ctx: typer.Context,
    source: Annotated[
        Path, typer.Argument(help="Local file", exists=True, dir_okay=False)
    ],
    path: Annotated[str, typer.Argument(help="Destination path in the bucket")],
    public: Annotated[
        bool, typer.Option("--public", help="Make the object publicly readable")
    ] = False,
    content_type: Annotated[
        Optional[str], typer.Option("--content-type", help="Content-Type header")
    ] = None,
) -> None:
    """
    Upload a local file.

    Examples:
        oss-adapter --bucket media put ./logo.png images/logo.png --public
    """
    config = {"visibility": Visibility.public if public else Visibility.private}
    if content_type:
        config["mimetype"] = content_type

    with source.open("rb") as stream:
        metadata = _unwrap(_adapter(ctx).write_stream(path, stream, config))
    typer.echo(f"✓ Uploaded {source} to {metadata.path}")


@app.command("rm")
def rm_cmd(
    ctx: typer.Context,
    path: Annotated[str, typer.Argument(help="File or directory to delete")],
    directory: Annotated[
        bool, typer.Option("--dir", help="Delete a directory and its contents")
    ] = False,
) -> None:
    """Delete a file, or a directory with --dir."""
    adapter = _adapter(ctx)
    if directory:
        _unwrap(adapter.delete_dir(path))
    else:
        _unwrap(adapter.delete(path))
    typer.echo(f"✓ Deleted {path}")


@app.command("url")
def url_cmd(
    ctx: typer.Context,
    path: Annotated[str, typer.Argument(help="File to link to")],
) -> None:
    """Print the public URL of a file."""
    typer.echo(_adapter(ctx).get_url(path))


@app.command("sign-url")
def sign_url_cmd(
    ctx: typer.Context,
    path: Annotated[str, typer.Argument(help="File to link to")],
    expires: Annotated[
        int, typer.Option("--expires", help="Validity in seconds")
    ] = 3600,
) -> None:
    """Print a temporary signed URL for a file."""
    typer.echo(_unwrap(_adapter(ctx).get_temporary_url(path, expires)))


if __name__ == "__main__":
    app()
