"""
CryptoLab Module Entry Point
=============================

Allows running the CryptoLab CLI via: python -m cryptolab
"""

from cryptolab.cli import main

if __name__ == "__main__":
    main()
