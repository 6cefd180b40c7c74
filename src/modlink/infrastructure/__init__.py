"""Infrastructure layer — filesystem projection, import resolution, VCS.

Depends on the domain layer and the standard library. Must never import
from services, commands, or output.
"""
