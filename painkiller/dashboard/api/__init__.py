from . import advice, habits

__all__ = ['advice', 'habits']
