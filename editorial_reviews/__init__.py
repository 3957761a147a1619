"""editorial_reviews: locate one editorial album review per site and normalize it."""

__version__ = "0.1.0"
