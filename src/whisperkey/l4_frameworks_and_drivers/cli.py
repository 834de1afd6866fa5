"""CLI entry point for whisperkey."""

from __future__ import annotations

import sys
from pathlib import Path

import click

from whisperkey import __version__
from whisperkey.l1_entities.errors import WhisperKeyError


def _fail(message: str) -> None:
    click.echo(f'Error: {message}', err=True)
    sys.exit(1)


def _container(ctx: click.Context):
    return ctx.obj['container']


def _resolve_bundle(ctx: click.Context):
    container = _container(ctx)
    try:
        return container.bundle_resolver.resolve(container.bundle_root)
    except WhisperKeyError as e:
        _fail(str(e))


@click.group()
@click.option(
    '-c',
    '--config',
    'config_path',
    default=None,
    type=click.Path(exists=True, dir_okay=False),
    help='Path to YAML config file.',
)
@click.option(
    '-r',
    '--root',
    default=None,
    type=click.Path(file_okay=False),
    help='Directory containing dist/whisper-bundle (overrides config).',
)
@click.option('--debug-log', is_flag=True, default=False, help='Write a debug log to the user log directory.')
@click.version_option(version=__version__)
@click.pass_context
def cli(ctx, config_path, root, debug_log):
    """whisperkey -- verify the whisper bundle, pick models, scrub scratch files."""
    from whisperkey.l3_interface_adapters.gateways.yaml_config_loader import (  # noqa: PLC0415 -- deferred: yaml stack not loaded on --help
        YamlConfigLoader,
    )
    from whisperkey.l4_frameworks_and_drivers.container import (  # noqa: PLC0415 -- deferred: not needed for --help
        DependencyContainer,
    )
    from whisperkey.l4_frameworks_and_drivers.infra_config import (  # noqa: PLC0415 -- deferred: not needed for --help
        build_app_config,
    )

    try:
        overrides: dict = {}
        if root:
            overrides['bundle'] = {'root': root}
        raw = YamlConfigLoader().load_raw(config_path, overrides=overrides if overrides else None)
        config = build_app_config(raw)
    except (FileNotFoundError, ValueError) as e:
        _fail(str(e))

    if debug_log:
        from whisperkey.l3_interface_adapters.gateways.paths import LOG_DIR  # noqa: PLC0415 -- deferred: only with --debug-log
        from whisperkey.l4_frameworks_and_drivers.logging_setup import setup_file_logging  # noqa: PLC0415

        setup_file_logging(LOG_DIR)

    ctx.ensure_object(dict)
    ctx.obj['container'] = DependencyContainer(config, settings=ctx.obj.get('settings'))


@cli.command('verify-bundle')
@click.pass_context
def verify_bundle(ctx):
    """Verify the bundled executable and default model against the manifest."""
    bundle = _resolve_bundle(ctx)
    click.echo(f'Bundle OK: {bundle.root}')
    click.echo(f'  executable:    {bundle.executable}')
    click.echo(f'  default model: {bundle.default_model}')


@cli.command('models')
@click.pass_context
def list_models(ctx):
    """List catalog and local models, marking the current selection."""
    bundle = _resolve_bundle(ctx)
    store = _container(ctx).selection_store
    snapshot = store.snapshot(bundle)
    for idx, option in enumerate(snapshot.options):
        marker = '*' if idx == snapshot.selected_index else ' '
        click.echo(f'{marker} {option.filename or "-":<24} {option.menu_title}')
    click.echo(snapshot.path_description)


@cli.command('select')
@click.argument('name', required=False)
@click.option('--default', 'use_default', is_flag=True, help='Clear the selection and use the bundled default model.')
@click.pass_context
def select_model(ctx, name, use_default):
    """Persist a model selection by catalog id or filename."""
    from whisperkey.l1_entities.model_option import ModelOption  # noqa: PLC0415 -- deferred: pydantic models

    if use_default == (name is not None):
        _fail('Pass exactly one of NAME or --default.')

    bundle = _resolve_bundle(ctx)
    store = _container(ctx).selection_store
    if use_default:
        store.apply_selection(ModelOption.bundle_default())
        click.echo(f'Using bundled default: {bundle.default_model.name}')
        return

    options = store.build_options(bundle)
    match = next(
        (o for o in options if o.filename == name or (o.model is not None and o.model.id == name)),
        None,
    )
    if match is None:
        _fail(f'Unknown model: {name}')
    if match.needs_download:
        _fail(f'{match.display_name} is not installed. Download it and run install-model first.')
    store.apply_selection(match)
    click.echo(f'Selected {match.display_name} ({match.filename})')


@cli.command('resolve-model')
@click.pass_context
def resolve_model(ctx):
    """Print the model path that would be handed to whisper-cli."""
    bundle = _resolve_bundle(ctx)
    store = _container(ctx).selection_store
    path = store.resolve_model_path(bundle)
    notice = store.drain_notice()
    if notice:
        click.echo(f'Warning: {notice}', err=True)
    click.echo(str(path))


@cli.command('install-model')
@click.argument('downloaded_file', type=click.Path(exists=True, dir_okay=False, path_type=Path))
@click.argument('model_id')
@click.pass_context
def install_model(ctx, downloaded_file, model_id):
    """Verify DOWNLOADED_FILE against catalog entry MODEL_ID and install it.

    The downloaded file is consumed: it is deleted whether or not it verifies.
    """
    from whisperkey.l1_entities.model_catalog import get_known_model  # noqa: PLC0415 -- deferred: catalog data

    model = get_known_model(model_id)
    if model is None:
        _fail(f'Unknown model: {model_id}')

    bundle = _resolve_bundle(ctx)
    container = _container(ctx)
    click.echo(f'Verifying {downloaded_file.name} as {model.display_name}...', err=True)
    try:
        destination = container.model_installer.install(downloaded_file, model, bundle.models_directory)
    except (WhisperKeyError, OSError) as e:
        _fail(f'Install of {model.display_name} aborted: {e}')
    click.echo(f'Installed {model.display_name} -> {destination}')


@cli.command('scrub')
@click.argument('target', type=click.Path(exists=True, path_type=Path))
@click.confirmation_option(prompt='Zero-fill and delete everything at this path?')
def scrub(target):
    """Zero-fill and remove TARGET (a file or a whole directory tree)."""
    from whisperkey.l3_interface_adapters.gateways.secure_scratch import (  # noqa: PLC0415 -- deferred
        secure_remove_tree,
    )

    try:
        secure_remove_tree(target)
    except WhisperKeyError as e:
        _fail(str(e))
    click.echo(f'Removed {target}')


@cli.command('hash')
@click.argument('files', nargs=-1, required=True, type=click.Path(exists=True, dir_okay=False, path_type=Path))
def hash_files(files):
    """Print SHA-256 digests in manifest-ready form."""
    from whisperkey.l3_interface_adapters.gateways.integrity_verifier import sha256_file  # noqa: PLC0415

    for path in files:
        click.echo(f'{sha256_file(path)}  {path}')
