# git_providers/cli.py

"""
Command-line interface for managing repositories on a configured Git host.
"""

import asyncio
from collections.abc import Awaitable, Callable
from typing import Any, TypeVar

import click

from .config import ConfigFileError, ConfigLoader, ConfigValidationError, GitProvidersConfig
from .core.exceptions import GitProviderError, ReconcileError
from .core.logging import LoggingConfig, setup_logging
from .source_control import (
    GitProvider,
    RepositoryInfo,
    RepositoryVisibility,
    create_default_factory,
    execute_with_retry,
    parse_org_repository_url,
    parse_organization_url,
    parse_user_repository_url,
    parse_user_url,
)

T = TypeVar("T")


def _load_config(ctx: click.Context) -> GitProvidersConfig:
    try:
        config = ConfigLoader().load_config(ctx.obj["config_file"])
    except ConfigValidationError as e:
        click.echo("❌ Configuration validation failed:", err=True)
        click.echo(e.format_errors(), err=True)
        raise click.Abort() from e
    except ConfigFileError as e:
        click.echo(f"❌ Configuration file error: {e}", err=True)
        raise click.Abort() from e

    setup_logging(
        LoggingConfig(level=ctx.obj["log_level"] or config.log_level, format=config.log_format)
    )
    return config


def _run(ctx: click.Context, operation: Callable[[GitProvider], Awaitable[T]]) -> T:
    """Build the configured provider, run ``operation`` on it and report failures."""
    config = _load_config(ctx)
    provider = create_default_factory().create_provider(config.provider)

    async def run() -> T:
        async with provider:
            return await operation(provider)

    try:
        return asyncio.run(run())
    except GitProviderError as e:
        click.echo(f"❌ {e}", err=True)
        raise click.Abort() from e


def _repository_ref(url: str, user: bool) -> Any:
    try:
        return parse_user_repository_url(url) if user else parse_org_repository_url(url)
    except GitProviderError as e:
        raise click.BadParameter(str(e), param_hint="REPO_URL") from e


def _repositories(provider: GitProvider, user: bool) -> Any:
    return provider.user_repositories if user else provider.org_repositories


def _describe(info: RepositoryInfo) -> str:
    return (
        f"visibility={info.visibility.value if info.visibility else '-'} "
        f"default_branch={info.default_branch or '-'} "
        f"description={info.description!r}"
    )


user_option = click.option(
    "--user", is_flag=True, help="The URL names a user account instead of an organization"
)


@click.group()
@click.option(
    "--config",
    "-c",
    "config_file",
    type=click.Path(),
    default=None,
    help="YAML configuration file; GIT_PROVIDERS_* variables override it",
)
@click.option(
    "--log-level",
    type=click.Choice(["DEBUG", "INFO", "WARNING", "ERROR"], case_sensitive=False),
    default=None,
    help="Override the configured log level",
)
@click.pass_context
def cli(ctx: click.Context, config_file: str | None, log_level: str | None) -> None:
    """Manage repositories on GitHub, GitLab and Bitbucket Server."""
    ctx.ensure_object(dict)
    ctx.obj["config_file"] = config_file
    ctx.obj["log_level"] = log_level


@cli.command("validate-config")
@click.pass_context
def validate_config(ctx: click.Context) -> None:
    """Validate the configuration and print a summary."""
    config = _load_config(ctx)
    provider = config.provider
    click.echo("✅ Configuration validation successful!")
    click.echo(f"   Schema version: {config.schema_version}")
    click.echo(f"   Provider: {provider.type} ({provider.domain})")
    click.echo(f"   API: {provider.resolved_api_base_url()}")
    click.echo(f"   Destructive actions: {'enabled' if provider.destructive_actions else 'disabled'}")
    click.echo(f"   Checksum: {config.calculate_checksum()[:12]}")


@cli.command("list-repos")
@click.argument("owner_url")
@user_option
@click.pass_context
def list_repos(ctx: click.Context, owner_url: str, user: bool) -> None:
    """List every repository of an organization (or user) URL."""
    try:
        owner = parse_user_url(owner_url) if user else parse_organization_url(owner_url)
    except GitProviderError as e:
        raise click.BadParameter(str(e), param_hint="OWNER_URL") from e

    repositories = _run(ctx, lambda provider: _repositories(provider, user).list(owner))
    for repository in repositories:
        click.echo(f"{repository.ref.full_name}  {_describe(repository.get())}")
    click.echo(f"{len(repositories)} repositories")


@cli.command("get-repo")
@click.argument("repo_url")
@user_option
@click.pass_context
def get_repo(ctx: click.Context, repo_url: str, user: bool) -> None:
    """Show one repository."""
    ref = _repository_ref(repo_url, user)
    repository = _run(ctx, lambda provider: _repositories(provider, user).get(ref))
    click.echo(f"{ref.full_name}  {_describe(repository.get())}")


@cli.command("reconcile-repo")
@click.argument("repo_url")
@click.option("--description", default=None, help="Desired description")
@click.option("--default-branch", default=None, help="Desired default branch")
@click.option(
    "--visibility",
    type=click.Choice([v.value for v in RepositoryVisibility]),
    default=None,
    help="Desired visibility",
)
@click.option("--retries", default=0, show_default=True, help="Retries on transport failures")
@user_option
@click.pass_context
def reconcile_repo(
    ctx: click.Context,
    repo_url: str,
    description: str | None,
    default_branch: str | None,
    visibility: str | None,
    retries: int,
    user: bool,
) -> None:
    """Create the repository or update it to the desired state."""
    ref = _repository_ref(repo_url, user)
    desired = RepositoryInfo(
        description=description, default_branch=default_branch, visibility=visibility
    )

    async def reconcile(provider: GitProvider) -> bool:
        client = _repositories(provider, user)
        _, action_taken = await execute_with_retry(
            lambda: client.reconcile(ref, desired), max_retries=retries
        )
        return action_taken

    try:
        action_taken = _run(ctx, reconcile)
    except click.Abort as e:
        cause = e.__cause__
        if isinstance(cause, ReconcileError) and cause.action_taken:
            click.echo("⚠️  A write was issued before the failure", err=True)
        raise
    if action_taken:
        click.echo(f"✅ {ref.full_name} reconciled")
    else:
        click.echo(f"✅ {ref.full_name} already up to date")


@cli.command("delete-repo")
@click.argument("repo_url")
@user_option
@click.confirmation_option(prompt="Delete the repository? This cannot be undone")
@click.pass_context
def delete_repo(ctx: click.Context, repo_url: str, user: bool) -> None:
    """Delete a repository (requires destructive_actions in the configuration)."""
    ref = _repository_ref(repo_url, user)
    _run(ctx, lambda provider: _repositories(provider, user).delete(ref))
    click.echo(f"✅ {ref.full_name} deleted")


def main() -> None:
    cli(obj={})


if __name__ == "__main__":
    main()
