# git_providers/__init__.py

"""
Unified asynchronous client for Git hosting providers.

Exposes one domain model (organizations, teams, repositories, branches,
commits, pull requests, deploy keys and team access) over GitHub, GitLab and
Bitbucket Server, with declarative reconciliation of desired state.
"""

__version__ = "0.1.0"
