"""CLI subcommands for deprules."""
