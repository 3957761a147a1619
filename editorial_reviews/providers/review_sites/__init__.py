"""Review-site adapter implementations.

Four concrete implementations of IReviewSource, one per site:

    1. AllMusicReviewSource: scraped search page, three-pass
       slug matcher, MusicAlbum JSON-LD rating + AJAX review fragment.
    2. PitchforkReviewSource: scraped search page, Review JSON-LD
       text + __PRELOADED_STATE__ score.
    3. NorthernTransmissionsReviewSource: WordPress REST listing API, HTML
       score and byline fallbacks.
    4. TheLineOfBestFitReviewSource: no search; persisted incremental
       crawl of the album index.

Each returns the same SiteReview record so the ReviewService can wrap any
of them into the common output envelope.
"""

from editorial_reviews.providers.review_sites.allmusic import AllMusicReviewSource
from editorial_reviews.providers.review_sites.northern_transmissions import (
    NorthernTransmissionsReviewSource,
)
from editorial_reviews.providers.review_sites.pitchfork import PitchforkReviewSource
from editorial_reviews.providers.review_sites.thelineofbestfit import (
    TheLineOfBestFitReviewSource,
)

__all__ = [
    "AllMusicReviewSource",
    "NorthernTransmissionsReviewSource",
    "PitchforkReviewSource",
    "TheLineOfBestFitReviewSource",
]
