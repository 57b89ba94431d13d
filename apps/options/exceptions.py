class OptionDefinitionError(ValueError):
    """An option payload cannot be turned into a definition."""
