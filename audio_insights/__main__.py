"""Package entry point for ``python -m audio_insights``."""

from audio_insights.cli import main

if __name__ == "__main__":
    main()
