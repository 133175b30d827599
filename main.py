"""Main entry point for the vaccination reminder service."""

from vaxremind.main import cli

if __name__ == "__main__":
    cli()
