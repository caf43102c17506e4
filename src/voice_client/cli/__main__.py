"""Entry point for running the CLI as a module.

Usage:
    python -m voice_client.cli --help
"""

from voice_client.cli.main import app

if __name__ == "__main__":
    app()
