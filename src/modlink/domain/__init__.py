"""Domain layer — pure types and logic.

No I/O beyond reading a single descriptor file. Must never import from
infrastructure, services, commands, or output.
"""
