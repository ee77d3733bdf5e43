"""
ccsetup - provisioning and guard rails for a ~/.claude configuration.

- Lifecycle: install, update, uninstall of agents, skills, commands, hooks
  and root documents, with a timestamped backup before every destructive step
- Hooks: a pre-bash command guard and a post-write formatter
"""

__version__ = "0.1.0"
