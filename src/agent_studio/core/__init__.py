"""Pipeline, agents, configuration and session history."""
