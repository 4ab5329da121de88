# git_providers/source_control/providers/__init__.py

"""Backend implementations: GitHub, GitLab and Bitbucket Server."""
