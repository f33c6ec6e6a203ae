#!/usr/bin/env python3
"""
moodstinger Launcher
Run this script to use the moodstinger command line without installing it.
"""

if __name__ == "__main__":
    import sys
    from moodstinger.main import main
    sys.exit(main())
