"""Infrastructure Layer.

File I/O for geoid models. Every loader returns domain Value Objects.
"""
