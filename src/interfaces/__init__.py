"""Interfaces Layer.

Entry points that turn user input into domain queries:
- cli: `geoid-height` command
- config: query configuration resolved from arguments and environment
"""
