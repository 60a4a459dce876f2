"""sourced-core application shells.

- cli: Typer CLI for inspecting and bootstrapping the shared resources
"""
