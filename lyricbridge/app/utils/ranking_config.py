"""
Configuration parameters for the catalog match scorer.
All weights, tiers, bonuses and thresholds are defined here for easy tuning.
"""


class MatchConfig:
    """Configuration for the title/artist match scoring algorithm."""

    # Title tiers (0..100)
    TITLE_EXACT_ORIGINAL = 100
    TITLE_EXACT_PROCESSED = 90
    TITLE_CLOSE_ORIGINAL = 80
    TITLE_CLOSE_PROCESSED = 70
    TITLE_CANDIDATE_CONTAINS_ORIGINAL = 60
    TITLE_ORIGINAL_CONTAINS_CANDIDATE = 50
    TITLE_CANDIDATE_CONTAINS_PROCESSED = 40
    TITLE_PROCESSED_CONTAINS_CANDIDATE = 30
    # Substring tiers only count when the contained side is longer than this
    TITLE_SUBSTRING_MIN_LENGTH = 3

    # Artist tiers (0..100)
    ARTIST_EXACT_ORIGINAL = 100
    ARTIST_EXACT_PROCESSED = 80
    ARTIST_CONTAINS_ORIGINAL = 60
    ARTIST_CONTAINS_PROCESSED = 40
    ARTIST_SCORE_CAP = 100

    # Dynamic weighting (title, artist)
    DEFAULT_WEIGHTS = (0.6, 0.4)
    ARTIST_FAVORED_WEIGHTS = (0.4, 0.6)
    ARTIST_FAVORED_MIN_ARTIST = 80
    ARTIST_FAVORED_MIN_TITLE = 40
    TITLE_FAVORED_WEIGHTS = (0.8, 0.2)
    TITLE_FAVORED_MIN_TITLE = 90
    TITLE_FAVORED_MIN_ARTIST = 40

    # Bonuses
    CORROBORATION_BONUS = 15
    CORROBORATION_MIN_TITLE = 70
    CORROBORATION_MIN_ARTIST = 80
    TRUST_ARTIST_BONUS = 10
    TRUST_ARTIST_MIN_TITLE = 40

    # Floors / ceiling
    EXACT_TITLE_FLOOR = 95
    SCORE_CEILING = 125
