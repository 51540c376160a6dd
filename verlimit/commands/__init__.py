"""CLI subcommands for verlimit."""
