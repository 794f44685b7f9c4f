"""Entry point: ``python cli.py analyze`` runs the full maternal health analysis."""

from maternal_health.cli import app

if __name__ == "__main__":
    app()
