# git_providers/source_control/providers/gitlab/__init__.py

"""GitLab provider built on python-gitlab."""

from .gitlab_provider import GitLabProvider


def register_providers(factory) -> None:
    factory.register_provider("gitlab", GitLabProvider)


__all__ = ["GitLabProvider", "register_providers"]
