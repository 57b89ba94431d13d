from .option_supply import ActiveOptionService

__all__ = ['ActiveOptionService']
