#!/usr/bin/env python
"""
VisionBoard - Main Entry Point
==============================
Run the gesture smartboard application.
Settings such as HF_TOKEN are read from a .env file in the working directory.
"""

from visionboard.ui import main

if __name__ == "__main__":
    main()
