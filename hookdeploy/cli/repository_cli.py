"""
CLI for registering, inspecting and test-deploying tracked repositories.
"""
import click
import logging
import re
import shutil
from datetime import datetime
from pathlib import Path

from ..config.global_config_loader import load_global_config
from ..core.enums import ProfileType
from ..core.exceptions import RegistryError, RepositoryLockTimeout
from ..core.models import RepositoryRecord
from ..deployment.factory import create_deployment_service
from ..monitoring.logs_storage import LogsStorage, GLOBAL_SCOPE
from ..pipeline.profiles import ProfileSelector, PROFILE_DESCRIPTIONS
from ..registry.file_repository_store import FileRepositoryStore
from ..registry.repository_store import generate_token, project_name_from_url


def _setup(global_config: str, log_level: str):
    """Configure logging and load the global config"""
    logging.basicConfig(
        level=getattr(logging, log_level.upper()),
        format='%(asctime)s - %(name)s - %(levelname)s - %(message)s'
    )
    return load_global_config(global_config)


def _git_host(git_url: str) -> str:
    match = re.match(r'^(?:https?://|git@)([^/:]+)', git_url)
    return match.group(1) if match else "gitlab.com"


def _print_record(record: RepositoryRecord) -> None:
    click.echo(f"  Name:       {record.name}")
    click.echo(f"  Type:       {record.profile_type}")
    click.echo(f"  Git URL:    {record.git_url}")
    click.echo(f"  Local path: {record.local_path}")
    click.echo(f"  Branch:     {record.branch}")
    click.echo(f"  Created:    {record.created_at or 'Unknown'}")


@click.command()
@click.argument('git_url', required=False)
@click.argument('local_path', required=False)
@click.argument('branch', required=False)
@click.argument('profile_type', metavar='TYPE', required=False)
@click.option('--global-config', default=None, help='Path to global config YAML')
@click.option('--log-level', default='WARNING', help='Log level')
def install(git_url: str, local_path: str, branch: str, profile_type: str, global_config: str, log_level: str):
    """Clone a repository and register it for webhook deployments"""
    config = _setup(global_config, log_level)
    profiles = ProfileSelector.available_profiles()

    if not git_url or not local_path:
        click.echo("Repository Installation\n")
        git_url = git_url or click.prompt("Git repository URL", default="", show_default=False)
        if not git_url:
            raise click.ClickException("Git URL is required")

        default_name = project_name_from_url(git_url, "project")
        default_path = str(Path(config.storage.repositories_dir).resolve() / default_name)
        local_path = click.prompt("Local path", default=default_path)
        branch = click.prompt("Branch", default=branch or config.deployment.default_branch)

        click.echo("\nAvailable project types:")
        for name in profiles:
            click.echo(f"  {name:<22} {PROFILE_DESCRIPTIONS[ProfileType(name)]}")
        profile_type = click.prompt(
            "Select project type",
            type=click.Choice(profiles),
            default=profile_type or config.deployment.default_profile
        )

        click.echo("\nConfiguration Summary")
        click.echo(f"  Git URL:    {git_url}")
        click.echo(f"  Local path: {local_path}")
        click.echo(f"  Branch:     {branch}")
        click.echo(f"  Type:       {profile_type}")
        if not click.confirm("Proceed with installation?", default=True):
            click.echo("Installation cancelled.")
            return

    branch = branch or config.deployment.default_branch
    profile_type = profile_type or config.deployment.default_profile
    if profile_type not in profiles:
        raise click.ClickException(
            f"Unknown deployment type: {profile_type} (expected one of: {', '.join(profiles)})"
        )

    service = create_deployment_service(config)
    name = project_name_from_url(git_url, local_path)
    if service.store.has(name):
        raise click.ClickException(f"Repository '{name}' already exists")

    click.echo(f"\nInstalling repository '{name}'")
    click.echo("Cloning repository...")
    if not service.clone(git_url, local_path, branch):
        raise click.ClickException("Failed to clone repository")

    record = RepositoryRecord(
        name=name,
        git_url=git_url,
        local_path=local_path,
        branch=branch,
        profile_type=profile_type,
        webhook_token=generate_token(),
        created_at=datetime.now().strftime('%Y-%m-%d %H:%M:%S'),
    )
    try:
        service.store.add(record)
    except RegistryError as e:
        raise click.ClickException(str(e))

    click.echo(f"✅ Repository '{name}' installed successfully!\n")

    deploy_key = Path.home() / ".ssh" / f"{name}_deploy"
    click.echo("Git hosting configuration required")
    click.echo("1. Deploy key")
    click.echo(f"   ssh-keygen -t ed25519 -f {deploy_key} -N ''")
    click.echo(f"   Add {deploy_key}.pub under Settings → Repository → Deploy Keys")
    click.echo(f"   SSH host alias: {_git_host(git_url)}-{name}")
    click.echo("2. Webhook")
    click.echo(f"   URL:    http://<this-server>:{config.server.port}/")
    click.echo(f"   Token:  {record.webhook_token}")
    click.echo("   Events: Push events, Merge request events")
    click.echo("   Add it under Settings → Webhooks and send a test push event.")


@click.command('list')
@click.option('--global-config', default=None, help='Path to global config YAML')
@click.option('--log-level', default='WARNING', help='Log level')
def list_repositories(global_config: str, log_level: str):
    """List tracked repositories"""
    config = _setup(global_config, log_level)
    store = FileRepositoryStore(config.storage.registry_path)

    try:
        records = store.all()
    except RegistryError as e:
        raise click.ClickException(str(e))

    if not records:
        click.echo("No repositories configured. Use 'hookdeploy install' to add one.")
        return

    click.echo(f"{'Name':<25} {'Local path':<40} {'Branch':<15} {'Type':<22} {'Created':<20}")
    click.echo("-" * 125)
    for record in records:
        click.echo(
            f"{record.name:<25} {record.local_path:<40} {record.branch:<15} "
            f"{record.profile_type:<22} {record.created_at or 'Unknown':<20}"
        )


@click.command()
@click.argument('name', required=False)
@click.option('--global-config', default=None, help='Path to global config YAML')
@click.option('--log-level', default='WARNING', help='Log level')
def remove(name: str, global_config: str, log_level: str):
    """Unregister a repository"""
    config = _setup(global_config, log_level)
    store = FileRepositoryStore(config.storage.registry_path)

    if not name:
        names = [record.name for record in store.all()]
        if not names:
            raise click.ClickException("No repositories configured. Use 'hookdeploy install' to add repositories.")
        name = click.prompt("Select repository to remove", type=click.Choice(names))

    record = store.get(name)
    if record is None:
        raise click.ClickException(f"Repository '{name}' not found.")

    click.echo(f"Repository to remove: {name}")
    _print_record(record)
    click.echo("\n⚠️  This removes the repository configuration. You may also want to clean up:")
    click.echo(f"  - SSH deploy key: ~/.ssh/{name}_deploy*")
    click.echo("  - The webhook in the project settings")

    if not click.confirm("Are you sure you want to remove this repository configuration?", default=False):
        click.echo("Operation cancelled.")
        return

    store.remove(name)
    click.echo(f"✅ Repository '{name}' removed successfully!")

    if click.confirm(
        f"Do you also want to completely delete the project directory at '{record.local_path}'? "
        "This action cannot be undone.",
        default=False
    ):
        project_dir = Path(record.local_path)
        if project_dir.is_dir():
            shutil.rmtree(project_dir)
            click.echo(f"Project directory '{project_dir}' deleted.")
        else:
            click.echo(f"Project directory '{project_dir}' not found or already deleted.")
    else:
        click.echo(f"Remember to remove the project directory manually if needed: rm -rf {record.local_path}")


@click.command()
@click.argument('name', required=False, default=GLOBAL_SCOPE)
@click.argument('lines', required=False, default=50, type=int)
@click.option('--level', default=None, help='Only show entries of this level')
@click.option('--global-config', default=None, help='Path to global config YAML')
@click.option('--log-level', default='WARNING', help='Log level')
def logs(name: str, lines: int, level: str, global_config: str, log_level: str):
    """Show the latest log entries of a repository (or the global log)"""
    config = _setup(global_config, log_level)
    storage = LogsStorage(config.storage.logs_dir)

    entries = storage.get_logs(name, lines=lines, level=level)
    if not entries:
        click.echo(f"No logs found for: {name}")
        return

    click.echo(f"Last {lines} log entries for: {name}")
    for entry in entries:
        timestamp = entry['timestamp'].strftime('%Y-%m-%d %H:%M:%S')
        click.echo(f"[{timestamp}] [{entry['level']}] {entry['message']}")


@click.command()
@click.argument('name')
@click.option('--global-config', default=None, help='Path to global config YAML')
@click.option('--log-level', default='INFO', help='Log level')
def test(name: str, global_config: str, log_level: str):
    """Run a deployment as if a push to the repository's branch had arrived"""
    config = _setup(global_config, log_level)
    logger = logging.getLogger(__name__)
    service = create_deployment_service(config)

    click.echo(f"Testing deployment for: {name}")
    try:
        outcome = service.deploy_by_name(name)
    except (RegistryError, RepositoryLockTimeout) as e:
        raise click.ClickException(str(e))

    click.echo(f"Profile: {outcome.profile_type}")

    for result in outcome.step_results:
        status = "skipped" if result.skipped else ("ok" if result.succeeded else "FAILED")
        click.echo(f"  {result.step_name:<20} {status}")
    if outcome.rollback_results is not None:
        click.echo("Rollback:")
        for result in outcome.rollback_results:
            click.echo(f"  {result.step_name:<20} {'ok' if result.succeeded else 'FAILED'}")

    if outcome.succeeded:
        click.echo(f"✅ Test deployment successful: {outcome.message}")
        return

    logger.debug(f"Failed outcome: {outcome.to_dict()}")
    raise click.ClickException(f"Test deployment failed: {outcome.message}")
