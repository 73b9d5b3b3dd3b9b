"""
Entry point for running hashcash-miner as a module.

Usage:
    python -m hashcash_miner hashcash1 verify <key> <challenge>
"""

from hashcash_miner.cli import main

if __name__ == "__main__":
    main()
