"""Command-line interface for the lofi automator."""

from __future__ import annotations

import json

import click
from pydantic import ValidationError

from lofi_automator.config import get_settings, load_registry, reset_settings
from lofi_automator.config.settings import Settings
from lofi_automator.constants import Extensions
from lofi_automator.errors import PipelineError
from lofi_automator.logging_config import configure_logging, get_logger
from lofi_automator.pipeline import ContentPipeline
from lofi_automator.utils.feature_flags import get_feature_flags, reset_feature_flags
from lofi_automator.video import ArtifactLocator

logger = get_logger(__name__)

template_argument = click.argument("template", required=False)


def console_code_provider(auth_url: str) -> str:
    """Show the authorization URL and read the code from the terminal."""
    click.echo("Authorize this app by visiting this URL:")
    click.echo(auth_url)
    click.echo("")
    return click.prompt("Enter the code from that page", default="", show_default=False)


def build_pipeline(settings: Settings) -> ContentPipeline:
    return ContentPipeline(settings, console_code_provider, flags=get_feature_flags())


def _pipeline(ctx: click.Context) -> ContentPipeline:
    try:
        return build_pipeline(ctx.obj["settings"])
    except PipelineError as e:
        raise _fail(e) from e


def _fail(error: PipelineError) -> click.ClickException:
    logger.error("pipeline_failed", stage=error.stage, error=str(error))
    return click.ClickException(f"{error.stage} failed: {error}")


def _format_size(size_bytes: int) -> str:
    return f"{size_bytes / 1024 / 1024:.2f} MB"


@click.group()
@click.option("--debug", is_flag=True, help="Enable debug mode")
@click.pass_context
def cli(ctx: click.Context, debug: bool) -> None:
    """Lofi Automator - render ambient videos and publish them to YouTube."""
    ctx.ensure_object(dict)
    reset_settings()
    reset_feature_flags()
    try:
        settings = get_settings()
    except ValidationError as e:
        raise click.ClickException(f"config failed: {e}") from e

    log_level = "DEBUG" if debug else settings.log_level
    configure_logging(log_level=log_level, debug=debug or settings.debug)

    ctx.obj["settings"] = settings
    logger.info("cli_started", debug=debug)


@cli.command()
@template_argument
@click.pass_context
def generate(ctx: click.Context, template: str | None) -> None:
    """Render a video (and thumbnail) sized for TEMPLATE."""
    pipeline = _pipeline(ctx)
    try:
        output = pipeline.produce(template)
    except PipelineError as e:
        raise _fail(e) from e

    click.echo(f"Video: {output.video}")
    click.echo(f"Size: {_format_size(output.video.stat().st_size)}")
    if output.thumbnail:
        click.echo(f"Thumbnail: {output.thumbnail}")
    click.echo('Next: run "lofi-automator upload" to publish it')


@cli.command()
@template_argument
@click.pass_context
def upload(ctx: click.Context, template: str | None) -> None:
    """Upload the newest video using TEMPLATE metadata (default template if omitted)."""
    pipeline = _pipeline(ctx)
    resolved = pipeline.registry.resolve(template)
    click.echo(f"Using template: {resolved.key}")

    try:
        outcome = pipeline.publish(template)
    except PipelineError as e:
        raise _fail(e) from e

    if outcome is None:
        click.echo(f"No video files found in {ctx.obj['settings'].paths.videos_dir}")
        click.echo('Run "lofi-automator generate" to render one first')
        return

    click.echo("Upload successful!")
    click.echo(f"Video ID: {outcome.result.remote_id}")
    click.echo(f"URL: {outcome.result.url}")
    if outcome.channel:
        click.echo(f"Channel: {outcome.channel.title}")
        click.echo(f"  Subscribers: {outcome.channel.subscriber_count or 'N/A'}")
        click.echo(f"  Total views: {outcome.channel.view_count or 'N/A'}")
        click.echo(f"  Videos: {outcome.channel.video_count or 'N/A'}")


@cli.command()
@template_argument
@click.pass_context
def run(ctx: click.Context, template: str | None) -> None:
    """Run the full pipeline (generate -> upload)."""
    click.echo("=== Lofi Automator - Daily Run ===")
    click.echo("\n1. Rendering...")
    ctx.invoke(generate, template=template)
    click.echo("\n2. Uploading...")
    ctx.invoke(upload, template=template)
    click.echo("\n=== Daily run complete! ===")


@cli.command()
@click.option("--json", "as_json", is_flag=True, help="Dump the full catalog as JSON")
@click.pass_context
def templates(ctx: click.Context, as_json: bool) -> None:
    """List available metadata templates."""
    settings = ctx.obj["settings"]
    try:
        registry = load_registry(settings.youtube.templates_file, settings.youtube.default_template)
    except PipelineError as e:
        raise _fail(e) from e

    if as_json:
        catalog = {template.key: template.to_dict() for template in registry}
        click.echo(json.dumps(catalog, indent=2, ensure_ascii=False))
        return

    click.echo("Available templates:")
    for index, template in enumerate(registry, start=1):
        marker = " (default)" if template.key == registry.default_key else ""
        click.echo(f"  {index}. {template.key}{marker}: {template.title[:40]}...")


@cli.command()
@click.pass_context
def status(ctx: click.Context) -> None:
    """Show rendered artifacts and totals."""
    paths = ctx.obj["settings"].paths
    locator = ArtifactLocator()

    sections = [
        ("Videos", paths.videos_dir, Extensions.VIDEO),
        ("Music", paths.music_dir, Extensions.MUSIC),
        ("Thumbnails", paths.videos_dir, Extensions.THUMBNAIL),
    ]
    click.echo("=== Output Status ===")
    for label, directory, extensions in sections:
        artifacts = locator.list_artifacts(directory, extensions)
        click.echo(f"{label}: {len(artifacts)}")
        for artifact in artifacts:
            click.echo(f"  {artifact.name}  {_format_size(artifact.size_bytes)}")

    summary = locator.summarize(paths.videos_dir, Extensions.VIDEO)
    click.echo(f"Total video size: {_format_size(summary.total_bytes)}")
    click.echo(f"Latest video: {summary.latest or 'none'}")


@cli.command()
@click.option("--text", default=None, help="Headline overlay text")
@click.option("--subtitle", default=None, help="Second overlay line")
@click.pass_context
def thumbnail(ctx: click.Context, text: str | None, subtitle: str | None) -> None:
    """Render a fresh thumbnail."""
    pipeline = _pipeline(ctx)
    try:
        path = pipeline.synthesizer.render_thumbnail(text, subtitle)
    except PipelineError as e:
        raise _fail(e) from e
    click.echo(f"Thumbnail: {path}")


@cli.command()
def flags() -> None:
    """Show feature flags after file and environment overrides."""
    for name, enabled in get_feature_flags().to_dict().items():
        click.echo(f"{name}: {'on' if enabled else 'off'}")


def main() -> None:
    """Entry point."""
    cli()


if __name__ == "__main__":
    main()
