"""Command line entry point for the marlint language server."""
