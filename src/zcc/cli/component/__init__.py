"""Component commands: inspect modes, workflows, agents and more across scopes."""
