"""CLI module for inspecting a voice-collection backend.

Usage:
    python -m voice_client.cli --help
    python -m voice_client.cli api sentences --locale fr --count 3
    python -m voice_client.cli config validate voice.yaml
"""

from voice_client.cli.main import app

__all__ = ["app"]
