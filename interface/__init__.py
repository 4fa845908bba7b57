"""
Interface package: text protocols for the tutor's computer opponent.

Modules:
    uci - Universal Chess Interface (UCI) handler with a Difficulty option.
          Can be run as a standalone script: python interface/uci.py
"""
