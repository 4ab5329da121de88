# git_providers/core/__init__.py

"""Cross-cutting pieces: exceptions, logging and cancellation."""
