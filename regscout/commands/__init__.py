"""Click subcommands for the regscout CLI."""
