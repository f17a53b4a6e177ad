"""PySide6 form controller and demo view for Universal Form."""
