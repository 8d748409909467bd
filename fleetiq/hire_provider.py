"""HireProvider class."""

from typing import Optional


class HireProvider:
    """A company supplying hired vehicles."""

    def __init__(self, id: str, name: Optional[str] = None):
        self.id = id
        self.name = name
