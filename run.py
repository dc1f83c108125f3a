#!/usr/bin/env python3
"""
ROCK_STORM Launcher
====================
Run this script to start the game.
"""

from rock_storm.main import main

if __name__ == "__main__":
    main()
