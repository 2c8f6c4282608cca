"""
Extension packages. Each ``<name>/commands/`` package holds modules whose
CommandDefinition subclasses and ALIASES tables are registered at start-up.
"""
