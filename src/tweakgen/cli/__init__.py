"""
Command Line Interface for tweakgen.
"""
