"""CLI module for suitewatch."""
