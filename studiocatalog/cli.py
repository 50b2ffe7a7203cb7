# Copyright 2025 Graveyard Jokes Studios
#
# Licensed under the Apache License, Version 2.0 (the "License");
# you may not use this file except in compliance with the License.
# You may obtain a copy of the License at
#
#     http://www.apache.org/licenses/LICENSE-2.0
#
# Unless required by applicable law or agreed to in writing, software
# distributed under the License is distributed on an "AS IS" BASIS,
# WITHOUT WARRANTIES OR CONDITIONS OF ANY KIND, either express or implied.
# See the License for the specific language governing permissions and
# limitations under the License.

import json

import click

# This module can be executed in two ways:
# 1. Package mode (recommended): `studiocatalog` command (pyproject.toml entry point)
# 2. Module mode (development): `python -m studiocatalog.cli` (uses __main__ guard at bottom)
from .logging import configure_structlog
from .services import IllustrationService, MaintenanceService, MediaListingService
from .storage import create_storage_adapter
from .utils.config import load_config
from .utils.exceptions import CatalogError
from .utils.url_generator import StorageUrlGenerator


class CLIContext:
    """Container for CLI dependency injection with type safety."""

    def __init__(self, config, storage, url_generator, media_service, illustration_service):
        self.config = config
        self.storage = storage
        self.url_generator = url_generator
        self.media_service = media_service
        self.illustration_service = illustration_service


def _echo_json(payload) -> None:
    click.echo(json.dumps(payload, indent=2, ensure_ascii=False))


@click.group()
@click.option("--config", "-c", help="Path to .env file")
@click.pass_context
def main(ctx, config):
    """studiocatalog - Media catalog for the studio site"""
    configure_structlog()

    try:
        config_obj = load_config(config)
        storage = create_storage_adapter(config_obj)
    except CatalogError as e:
        click.echo(f"❌ Configuration error: {e}", err=True)
        ctx.exit(1)

    url_generator = StorageUrlGenerator(
        storage,
        cdn_host=config_obj.cdn_host,
        expiry_tolerance_seconds=config_obj.url_expiry_tolerance_seconds,
    )

    ctx.obj = CLIContext(
        config=config_obj,
        storage=storage,
        url_generator=url_generator,
        media_service=MediaListingService(storage, url_generator, config_obj),
        illustration_service=IllustrationService(storage, url_generator, config_obj),
    )


@main.command("list-media")
@click.pass_context
def list_media(ctx):
    """Print the video log catalog as JSON"""
    try:
        entries = ctx.obj.media_service.list_entries()
    except CatalogError as e:
        click.echo(f"❌ Failed to list media: {e}", err=True)
        ctx.exit(1)

    _echo_json({"data": [entry.model_dump() for entry in entries]})


@main.command("list-illustrations")
@click.pass_context
def list_illustrations(ctx):
    """Print the illustration gallery as JSON"""
    try:
        illustrations = ctx.obj.illustration_service.list_illustrations()
    except CatalogError as e:
        click.echo(f"❌ Failed to list illustrations: {e}", err=True)
        ctx.exit(1)

    _echo_json({"data": [item.model_dump(exclude_none=True) for item in illustrations]})


@main.command("list-keys")
@click.argument("prefix", default="")
@click.pass_context
def list_keys(ctx, prefix):
    """List raw storage keys under PREFIX (default: bucket root)"""
    try:
        keys = ctx.obj.storage.files(prefix)
    except CatalogError as e:
        click.echo(f"❌ Failed to list '{prefix}': {e}", err=True)
        ctx.exit(1)

    if not keys:
        click.echo(f"No objects under '{prefix or '/'}'")
        return

    for key in keys:
        click.echo(key)
    click.echo(f"\n✓ {len(keys)} object(s)")


@main.command("generate-gif-thumbnails")
@click.option("--force", "-f", is_flag=True, help="Regenerate previews that already exist")
@click.pass_context
def generate_gif_thumbnails(ctx, force):
    """Write JPEG previews for the animated GIF illustrations"""
    service = MaintenanceService(ctx.obj.storage, ctx.obj.illustration_service)

    click.echo("🖼  Scanning illustrations for GIFs...")
    try:
        result = service.generate_gif_thumbnails(force=force)
    except CatalogError as e:
        click.echo(f"❌ Failed to generate thumbnails: {e}", err=True)
        ctx.exit(1)

    for key in result.skipped:
        click.echo(f"  • {key}: preview exists, skipping")
    for key in result.generated:
        click.echo(f"  ✓ {key}")
    for key in result.failed:
        click.echo(f"  ✗ {key}: could not render preview", err=True)

    click.echo(f"\n✓ Processed {result.gif_count} GIF(s), generated {len(result.generated)} preview(s)")
    if result.skipped and not force:
        click.echo("💡 Run with --force to regenerate existing previews")
    if result.failed:
        ctx.exit(1)


@main.command("normalize-prefix")
@click.argument("source")
@click.argument("target")
@click.option("--force", "-f", is_flag=True, help="Overwrite objects that already exist under TARGET")
@click.option("--delete-original", is_flag=True, help="Delete each source object after copying it")
@click.option("--limit", "-l", type=click.IntRange(min=1), help="Maximum objects to process")
@click.option("--dry-run", "-d", is_flag=True, help="Show what would be copied without writing")
@click.pass_context
def normalize_prefix(ctx, source, target, force, delete_original, limit, dry_run):
    """Copy every object under SOURCE to the same key under TARGET"""
    service = MaintenanceService(ctx.obj.storage, ctx.obj.illustration_service)

    click.echo(f"📦 {source} -> {target} ({'dry run' if dry_run else 'live run'})")
    try:
        result = service.normalize_prefix(
            source,
            target,
            dry_run=dry_run,
            overwrite=force,
            delete_original=delete_original,
            limit=limit,
        )
    except ValueError as e:
        click.echo(f"❌ {e}", err=True)
        ctx.exit(1)
    except CatalogError as e:
        click.echo(f"❌ Failed to normalize '{source}': {e}", err=True)
        ctx.exit(1)

    for key in result.skipped:
        click.echo(f"  • {key} exists, skipping")
    for key, target_key in result.copied:
        click.echo(f"  {'would copy' if dry_run else '✓ copied'} {key} -> {target_key}")
    for key in result.deleted:
        click.echo(f"  ✓ deleted {key}")

    if result.limit_reached:
        click.echo(f"\nLimit reached ({limit}), stopping")
    click.echo(f"\n✓ {len(result.copied)} object(s) processed, {len(result.skipped)} skipped")
    if dry_run:
        click.echo("\n(Run without --dry-run to copy)")


@main.command()
@click.option("--host", "-h", default="127.0.0.1", help="Host to bind to (default: 127.0.0.1)")
@click.option("--port", "-p", default=8000, type=int, help="Port to bind to (default: 8000)")
@click.option("--reload", is_flag=True, help="Enable auto-reload for development")
@click.pass_context
def server(ctx, host, port, reload):
    """Start the web server for the catalog API.

    Examples:
        studiocatalog server                      # Start on localhost:8000
        studiocatalog server --port 8080          # Custom port
        studiocatalog server --host 0.0.0.0       # Bind to all interfaces
    """
    import uvicorn

    from .web.app import create_app

    config = ctx.obj.config

    click.echo("🌐 Starting studiocatalog web server...")
    click.echo(f"   Host: {host}")
    click.echo(f"   Port: {port}")
    click.echo(f"   Environment: {config.app_env}")
    click.echo(f"   Storage: {config.storage_backend}")
    if config.cdn_host:
        click.echo(f"   CDN: {config.cdn_host}")
    click.echo("")
    click.echo(f"🎬 Video logs: http://{host}:{port}/api/video-logs")
    click.echo(f"🖼  Illustrations: http://{host}:{port}/api/illustrations")
    click.echo(f"📚 API Docs: http://{host}:{port}/docs")
    click.echo("")

    if reload:
        # Reload needs an import string; the factory reloads config and logging from the environment
        uvicorn.run("studiocatalog.web.app:create_app_from_env", factory=True, host=host, port=port, reload=True, log_level="info")
        return

    # Create app with existing config and storage to share services
    app = create_app(config, storage=ctx.obj.storage)

    uvicorn.run(app, host=host, port=port, log_level="info")


if __name__ == "__main__":
    main()
