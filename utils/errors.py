"""
Exceptions shared by the maze core
"""


class SaveDataError(ValueError):
    """Exported game or visibility state is missing fields or malformed"""
