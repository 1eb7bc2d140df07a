"""
Catalog match scoring service.
Scores each search result against the normalized query and picks the best one.
"""

import logging
import re
from dataclasses import dataclass, field
from typing import Any, Dict, List, Optional, Sequence, Tuple

from .catalog import CatalogCandidate
from .normalize import NormalizedQuery, core_script_run
from .ranking_config import MatchConfig

logger = logging.getLogger(__name__)

_CLOSE_MATCH_NOISE_RE = re.compile(r"\(.*?\)| - .*|【.*?】")
_CANDIDATE_ARTIST_SPLIT_RE = re.compile(r"\s*,\s*|\s+&\s+")


class ScoreBreakdown:
    """Detailed breakdown of a candidate's score."""

    def __init__(self):
        self.total = 0.0
        self.components = {
            "title": 0.0,
            "artist": 0.0,
            "bonus": 0.0,
        }
        self.details: List[Dict[str, Any]] = []

    def add_detail(self, key: str, value: float, family: str, note: str = None):
        """Record a scoring step; families other than 'bonus' hold raw tier values."""
        detail = {
            "key": key,
            "value": value,
            "family": family
        }
        if note:
            detail["note"] = note
        self.details.append(detail)
        self.components[family] += value

    def to_dict(self) -> Dict[str, Any]:
        """Plain dict form, written to the debug log for every ranked candidate."""
        return {
            "total": round(self.total, 2),
            "components": {k: round(v, 2) for k, v in self.components.items()},
            "details": self.details
        }


@dataclass
class MatchScore:
    candidate: CatalogCandidate
    title_score: float
    artist_score: float
    combined_score: float
    breakdown: ScoreBreakdown = field(default_factory=ScoreBreakdown, repr=False)


class RankingService:
    """Service to rank catalog search results against a lyric lookup query."""

    def __init__(self, config: MatchConfig = None):
        self.config = config or MatchConfig()

    def normalize_text(self, text: str) -> str:
        return (text or "").strip().lower()

    def is_close_match(self, song_title: str, target_title: str) -> bool:
        """
        Titles match once bracketed/dash annotations are dropped, or the target's
        CJK/Kana core appears verbatim inside the candidate title.
        """
        clean_song = _CLOSE_MATCH_NOISE_RE.sub("", song_title).strip()
        clean_target = _CLOSE_MATCH_NOISE_RE.sub("", target_title).strip()
        if clean_song and clean_song == clean_target:
            return True

        core = core_script_run(target_title)
        if core and core in song_title:
            return True
        return False

    def score_title(self, song_title: str, processed_title: str, original_title: str,
                    breakdown: ScoreBreakdown) -> float:
        """Tiered exact/close/substring comparison; all arguments lower-cased."""
        c = self.config
        min_len = c.TITLE_SUBSTRING_MIN_LENGTH
        if not song_title:
            score, key = 0, "title.missing"
        elif original_title and song_title == original_title:
            score, key = c.TITLE_EXACT_ORIGINAL, "title.exact-original"
        elif processed_title and song_title == processed_title:
            score, key = c.TITLE_EXACT_PROCESSED, "title.exact-processed"
        elif original_title and self.is_close_match(song_title, original_title):
            score, key = c.TITLE_CLOSE_ORIGINAL, "title.close-original"
        elif processed_title and self.is_close_match(song_title, processed_title):
            score, key = c.TITLE_CLOSE_PROCESSED, "title.close-processed"
        elif len(original_title) > min_len and original_title in song_title:
            score, key = c.TITLE_CANDIDATE_CONTAINS_ORIGINAL, "title.contains-original"
        elif len(song_title) > min_len and song_title in original_title:
            score, key = c.TITLE_ORIGINAL_CONTAINS_CANDIDATE, "title.within-original"
        elif len(processed_title) > min_len and processed_title in song_title:
            score, key = c.TITLE_CANDIDATE_CONTAINS_PROCESSED, "title.contains-processed"
        elif len(song_title) > min_len and song_title in processed_title:
            score, key = c.TITLE_PROCESSED_CONTAINS_CANDIDATE, "title.within-processed"
        else:
            score, key = 0, "title.miss"
        breakdown.add_detail(key, score, "title")
        return score

    def _artist_pair_score(self, song_artist: str, target_artist: str, original_artist: str) -> int:
        c = self.config
        if original_artist and song_artist == original_artist:
            return c.ARTIST_EXACT_ORIGINAL
        if song_artist == target_artist:
            return c.ARTIST_EXACT_PROCESSED
        if original_artist and (original_artist in song_artist or song_artist in original_artist):
            return c.ARTIST_CONTAINS_ORIGINAL
        if target_artist in song_artist or song_artist in target_artist:
            return c.ARTIST_CONTAINS_PROCESSED
        return 0

    def score_artist(self, song_artists: str, target_artists: Sequence[str], original_artist: str,
                     breakdown: ScoreBreakdown) -> float:
        """Best tier over every (target artist, candidate artist token) pair, capped."""
        tokens = [t for t in _CANDIDATE_ARTIST_SPLIT_RE.split(song_artists) if t]
        best = 0
        for target in target_artists:
            target_lower = self.normalize_text(target)
            if not target_lower:
                continue
            for token in tokens:
                best = max(best, self._artist_pair_score(token, target_lower, original_artist))
        score = min(best, self.config.ARTIST_SCORE_CAP)
        breakdown.add_detail("artist.best", score, "artist")
        return score

    def weights_for(self, title_score: float, artist_score: float) -> Tuple[float, float]:
        """Shift emphasis toward whichever signal is more trustworthy."""
        c = self.config
        weights = c.DEFAULT_WEIGHTS
        if artist_score >= c.ARTIST_FAVORED_MIN_ARTIST and title_score >= c.ARTIST_FAVORED_MIN_TITLE:
            weights = c.ARTIST_FAVORED_WEIGHTS
        if title_score >= c.TITLE_FAVORED_MIN_TITLE and artist_score >= c.TITLE_FAVORED_MIN_ARTIST:
            weights = c.TITLE_FAVORED_WEIGHTS
        return weights

    def score_candidate(self, candidate: CatalogCandidate, query: NormalizedQuery) -> MatchScore:
        """Score a single candidate against the query."""
        c = self.config
        breakdown = ScoreBreakdown()

        song_title = self.normalize_text(candidate.display_title)
        song_artists = self.normalize_text(candidate.artist_name)
        original_title = self.normalize_text(query.raw_track_name)
        original_artist = self.normalize_text(query.raw_artist_name)
        processed_title = self.normalize_text(query.search_track_name)

        title_score = self.score_title(song_title, processed_title, original_title, breakdown)
        artist_score = self.score_artist(song_artists, query.artists, original_artist, breakdown)

        title_weight, artist_weight = self.weights_for(title_score, artist_score)
        total = title_score * title_weight + artist_score * artist_weight

        if song_title and song_title == original_title and total < c.EXACT_TITLE_FLOOR:
            breakdown.add_detail("floor.exact-title", c.EXACT_TITLE_FLOOR - total, "bonus")
            total = c.EXACT_TITLE_FLOOR
        if title_score >= c.CORROBORATION_MIN_TITLE and artist_score >= c.CORROBORATION_MIN_ARTIST:
            breakdown.add_detail("bonus.corroboration", c.CORROBORATION_BONUS, "bonus")
            total += c.CORROBORATION_BONUS
        if artist_score == c.ARTIST_EXACT_ORIGINAL and title_score >= c.TRUST_ARTIST_MIN_TITLE:
            breakdown.add_detail("bonus.trust-artist", c.TRUST_ARTIST_BONUS, "bonus")
            total += c.TRUST_ARTIST_BONUS
        if (song_title and song_title == original_title
                and song_artists and song_artists == original_artist):
            breakdown.add_detail("ceiling.exact-match", c.SCORE_CEILING - total, "bonus")
            total = c.SCORE_CEILING

        breakdown.total = total
        return MatchScore(
            candidate=candidate,
            title_score=title_score,
            artist_score=artist_score,
            combined_score=total,
            breakdown=breakdown,
        )

    def find_exact_match(self, candidates: Sequence[CatalogCandidate],
                         query: NormalizedQuery) -> Optional[CatalogCandidate]:
        """Candidate whose title and full artist string equal the raw query, case-insensitively."""
        track = self.normalize_text(query.raw_track_name)
        artist = self.normalize_text(query.raw_artist_name)
        if not track or not artist:
            return None
        for candidate in candidates:
            title = self.normalize_text(candidate.display_title)
            artists = self.normalize_text(candidate.artist_name)
            if title and artists and title == track and artists == artist:
                return candidate
        return None

    def rank_candidates(self, candidates: Sequence[CatalogCandidate],
                        query: NormalizedQuery) -> List[MatchScore]:
        """
        Score every candidate, sorted by combined score (descending).
        Tie-breaking: preserve original order from search results.
        """
        scored = [(self.score_candidate(c, query), idx) for idx, c in enumerate(candidates)]
        scored.sort(key=lambda pair: (-pair[0].combined_score, pair[1]))
        return [score for score, _ in scored]

    def select_best_match(self, candidates: Sequence[CatalogCandidate],
                          query: NormalizedQuery) -> Optional[CatalogCandidate]:
        """
        Pick the best candidate; None only when there are no candidates.
        When nothing scores above zero the provider's first result is used.
        """
        if not candidates:
            return None

        exact = self.find_exact_match(candidates, query)
        if exact is not None:
            logger.info("Exact match: %r - %r", exact.display_title, exact.artist_name)
            return exact

        ranked = self.rank_candidates(candidates, query)
        for score in ranked:
            logger.debug(
                "Candidate %r - %r: %s",
                score.candidate.display_title,
                score.candidate.artist_name,
                score.breakdown.to_dict(),
            )
        best = ranked[0]
        if best.combined_score > 0:
            return best.candidate
        logger.info("No candidate scored above zero; falling back to provider ranking")
        return candidates[0]


def select_best_match(candidates: Sequence[CatalogCandidate], query: NormalizedQuery,
                      config: MatchConfig = None) -> Optional[CatalogCandidate]:
    return RankingService(config).select_best_match(candidates, query)
