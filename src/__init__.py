"""Application Layer.

Infrastructure adapters and interfaces that orchestrate domain logic.
This layer handles file I/O, configuration, and the command line.
"""
