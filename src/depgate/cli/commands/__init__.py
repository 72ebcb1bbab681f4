"""depgate CLI subcommands."""
