# Blockwell - A falling-block puzzle engine
# exceptions.py - Custom exceptions for the puzzle engine

class InvalidPieceTypeException(ValueError):
    """Raised when a piece factory is handed a type outside I, J, L, O, S, T, Z."""
    pass

class GridIndexException(IndexError):
    """Raised on any grid access outside the well."""
    pass

class ConfigurationException(ValueError):
    """Raised when a game configuration is malformed."""
    pass

class InvalidCellValueException(ValueError):
    """Raised when a grid cell is set to anything but 0 or a colour index 1-7."""
    pass
