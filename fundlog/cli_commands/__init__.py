"""Command registrations for the Typer CLI.

`fundlog/cli.py` stays the entrypoint module (`pyproject.toml` points the
script at `fundlog.cli:app`); commands live in this package and are
registered from there.
"""
