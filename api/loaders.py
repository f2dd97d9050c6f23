from typing import List

from strawberry.dataloader import DataLoader

from catalog.database import CatalogDatabase


class Loaders:
    """Per-request batch loaders. A new instance is built for every request."""

    def __init__(self, db: CatalogDatabase):
        self.db = db
        self.book_count_loader = DataLoader(load_fn=self.load_book_counts)

    async def load_book_counts(self, author_ids: List[str]) -> List[int]:
        """Batch load book counts by author id."""
        counts = await self.db.count_books_by_author(list(author_ids))
        return [counts.get(author_id, 0) for author_id in author_ids]
