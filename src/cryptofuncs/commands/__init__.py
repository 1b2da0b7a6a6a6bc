"""Subcommands for the cryptofuncs CLI."""
