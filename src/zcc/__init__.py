"""
zcc - starter packs and components for AI coding assistants

zcc discovers packs of modes, workflows, agents and hooks from local,
HTTP and GitHub sources, installs them into a project while tracking
every file it writes, and resolves components across builtin, global
and project scopes.
"""

__version__ = "1.0.0"
__all__ = ["__version__"]
