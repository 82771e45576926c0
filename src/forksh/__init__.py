"""Execution engine for a command-line shell.

See `forksh.shell` for the evaluator and `forksh.cli` for the command-line entry point.
"""
