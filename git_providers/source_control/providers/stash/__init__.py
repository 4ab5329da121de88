# git_providers/source_control/providers/stash/__init__.py

"""Bitbucket Server provider built on httpx."""

from .stash_provider import StashProvider


def register_providers(factory) -> None:
    factory.register_provider("stash", StashProvider)


__all__ = ["StashProvider", "register_providers"]
