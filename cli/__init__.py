"""Command line interface for sigmoidnet."""
