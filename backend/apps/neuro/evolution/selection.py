"""
Fitness records, ranking and champion selection.

Scores are distance-like: lower is strictly better, zero is the ideal
and there is no upper bound. Records are regenerated every generation.
Non-finite scores are treated as the worst possible score so that
degenerate individuals sink to the bottom of the ranking instead of
aborting the generation.
"""
import math
from dataclasses import dataclass
from typing import Iterable, List, Optional


@dataclass
class FitnessRecord:
    """Score of one individual for the current generation."""
    individual_id: int
    score: float = 0.0

    @property
    def is_degenerate(self) -> bool:
        return not math.isfinite(self.score)


@dataclass
class Champion:
    """
    Best individual found so far (elitism).

    Starts as "no champion, infinite score". The stored score carries
    the slack added by ChampionPolicy, so it is usually a little worse
    than the score the champion actually achieved.
    """
    individual_id: Optional[int] = None
    score: float = math.inf

    @property
    def exists(self) -> bool:
        return self.individual_id is not None


def sanitize_score(score: float) -> float:
    """Map NaN and +/-inf to +inf (the worst score)."""
    score = float(score)
    return score if math.isfinite(score) else math.inf


def _sort_key(record: FitnessRecord) -> float:
    return sanitize_score(record.score)


def rank(records: Iterable[FitnessRecord]) -> List[FitnessRecord]:
    """
    Sort records ascending by score.

    The sort is stable, so ties keep their population order. Index 0 of
    the result is the generation's winner.

    Args:
        records: Fitness records for one generation.

    Returns:
        New list, best first.
    """
    return sorted(records, key=_sort_key)


class ChampionPolicy:
    """
    Decide whether a generation's winner replaces the champion.

    A winner is adopted only if its score is strictly lower than the
    stored champion score. On adoption the champion's stored score is
    the winner's score plus `accept_slack`, so the next challenger has
    to beat it by a margin. Otherwise the stored score grows by
    `reject_slack`, which slowly lowers the bar and keeps progress from
    stalling on a lucky champion.

    Example:
        policy = ChampionPolicy(accept_slack=0.1, reject_slack=1.0)
        champion = Champion(individual_id=0, score=5.0)
        policy.update(champion, FitnessRecord(3, 4.5))
        # champion.individual_id == 3, champion.score == 4.6
    """

    def __init__(self, accept_slack: float = 0.1, reject_slack: float = 1.0):
        """
        Initialize the policy.

        Args:
            accept_slack: Added to a newly adopted champion's score.
            reject_slack: Added to the champion's score when it survives.
        """
        self.accept_slack = accept_slack
        self.reject_slack = reject_slack

    def update(self, champion: Champion, winner: Optional[FitnessRecord]) -> bool:
        """
        Update the champion in place from this generation's winner.

        A missing or degenerate winner counts as non-improving.

        Args:
            champion: Persistent champion to update.
            winner: Best record of the generation (ranked index 0).

        Returns:
            True if the winner became the new champion.
        """
        if winner is not None and not winner.is_degenerate and winner.score < champion.score:
            champion.individual_id = winner.individual_id
            champion.score = winner.score + self.accept_slack
            return True

        champion.score += self.reject_slack
        return False
