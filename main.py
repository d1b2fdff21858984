#!/usr/bin/env python3
"""
ABOUTME: Entry point for the env-guardian CLI
ABOUTME: Simple wrapper that imports and runs the validation CLI
"""

from env_guardian.cli import main

if __name__ == "__main__":
    main()
