"""
Entry point for running suitewatch as a module: python -m suitewatch
"""

from suitewatch.cli.commands import app

if __name__ == "__main__":
    app()
