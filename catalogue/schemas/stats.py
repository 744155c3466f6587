from pydantic import BaseModel, ConfigDict, Field
from typing import ClassVar

from catalogue.models.book import Book


# Catalogue-wide aggregates
class CatalogueStats(BaseModel):
    total_books: int = Field(alias="totalBooks")
    total_authors: int = Field(alias="totalAuthors")
    total_genres: int = Field(alias="totalGenres")
    genre_distribution: dict[str, int] = Field(alias="genreDistribution")
    year_distribution: dict[str, int] = Field(alias="yearDistribution")
    recently_added: list[Book] = Field(alias="recentlyAdded")

    model_config: ClassVar[ConfigDict] = ConfigDict(populate_by_name=True)
