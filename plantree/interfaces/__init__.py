"""Interfaces layer for plantree.

- cli: Typer command-line interface over the plan engine
"""
