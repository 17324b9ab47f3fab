"""
Entry point for running the CLI as a module.

Usage:
    python -m agent_treasury
"""

from agent_treasury.cli import main

if __name__ == "__main__":
    main()
