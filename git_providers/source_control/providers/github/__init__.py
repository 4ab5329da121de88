# git_providers/source_control/providers/github/__init__.py

"""GitHub provider built on PyGithub."""

from .github_provider import GitHubProvider


def register_providers(factory) -> None:
    factory.register_provider("github", GitHubProvider)


__all__ = ["GitHubProvider", "register_providers"]
