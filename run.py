#!/usr/bin/env python3
"""
ASTRO_STRIKE Launcher
======================
Run this script to start the game.
"""

from astro_strike.main import main

if __name__ == "__main__":
    main()
