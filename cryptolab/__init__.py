"""
CryptoLab -- Classical Cipher Engine & Cryptanalysis Lab
=========================================================

Encrypts and decrypts text with the classical ciphers (Caesar, Vigenere,
Beaufort, Autokey, Playfair, Hill, rail fence, columnar, Myszkowski,
double transposition, super encryption) and measures the result with
frequency analysis, the Index of Coincidence, Shannon entropy and
Kasiski key-length estimation.

Modules:
    - cryptolab.ciphers: Cipher transforms and the catalog registry
    - cryptolab.analyzers: Frequency, entropy, key-length and scoring
    - cryptolab.core.engine: Central orchestrator
    - cryptolab.core.models: Pydantic data models
    - cryptolab.metrics: Performance tracker and metric sinks
    - cryptolab.output: Console and report output
    - cryptolab.cli: Click-based command-line interface

References:
    - Shannon, C. E. (1949). Communication Theory of Secrecy Systems.
    - Friedman, W. F. (1922). The Index of Coincidence and Its
      Applications in Cryptanalysis.
    - Kahn, D. (1996). The Codebreakers. Scribner.
"""

__version__ = "1.0.0"
__tool_name__ = "cryptolab"
