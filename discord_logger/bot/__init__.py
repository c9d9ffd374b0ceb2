"""Discord bot runtime: gateway client, slash commands and the CLI."""
