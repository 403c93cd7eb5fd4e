"""Command line entry points for the check and in steps."""
