"""Entry point for the SameGame console prototype.

Sets up the ECS world, event bus, engine and console collaborators.
"""
import sys

from samegame.cli import main

if __name__ == "__main__":
    sys.exit(main())
