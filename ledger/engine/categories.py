"""
Category Registry

A flat name -> id lookup over the state's category list.

Transactions store the category NAME, not its id. Adding or renaming
registry entries never rewrites existing transactions; a transaction
whose category is no longer registered is tolerated as-is.
"""

from typing import Optional

from ledger.models.ledger import Category


class CategoryRegistry:
    """
    Lookup and growth operations on a category list.

    The registry works directly on the list it is given, so changes
    are visible in the owning FinanceState.
    """

    def __init__(self, categories: list[Category]):
        self._categories = categories

    def names(self) -> list[str]:
        return [category.name for category in self._categories]

    def lookup(self, name: str) -> Optional[str]:
        """Return the id registered for an exact name, or None."""
        for category in self._categories:
            if category.name == name:
                return category.id
        return None

    def contains(self, name: str) -> bool:
        return self.lookup(name) is not None

    def add(self, name: str) -> Category:
        """
        Register a new category name.

        An exact name that already exists is returned unchanged.
        Ids are numeric strings continuing from the largest one in use.
        """
        name = name.strip()
        if not name:
            raise ValueError("Category name cannot be empty")

        existing = self.lookup(name)
        if existing is not None:
            return Category(id=existing, name=name)

        category = Category(id=self._next_id(), name=name)
        self._categories.append(category)
        return category

    def _next_id(self) -> str:
        numeric = [int(c.id) for c in self._categories if c.id.isdigit()]
        candidate = max(numeric, default=0) + 1
        taken = {c.id for c in self._categories}
        while str(candidate) in taken:
            candidate += 1
        return str(candidate)

    def __len__(self) -> int:
        return len(self._categories)
