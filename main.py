#!/usr/bin/env python3
"""Entry point for running font-catcher from a source checkout."""

from fontcatcher.cli import cli

if __name__ == "__main__":
    cli()
