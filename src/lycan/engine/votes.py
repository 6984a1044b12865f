"""Vote tallying for mayor elections and expulsions.

Rules:
- One ballot per voter (voter id -> target id)
- NO_EXPULSION ballots are not counted for anyone
- Most votes wins; a tie is broken uniformly at random and reported
- No countable ballots -> no winner
"""

import random
from collections import Counter
from typing import Mapping, Optional

from lycan.events.game_events import VoteResult

NO_EXPULSION: str = "no_expulsion"


def count_votes(votes: Mapping[str, str]) -> dict[str, int]:
    """Count ballots per target, skipping abstentions.

    Returns:
        Dict of target id -> number of votes, in first-vote order.
    """
    counter: Counter[str] = Counter()
    for target in votes.values():
        if target is None or target == NO_EXPULSION:
            continue
        counter[target] += 1
    return dict(counter)


def tally_votes(
    votes: Mapping[str, str],
    rng: Optional[random.Random] = None,
) -> VoteResult:
    """Resolve a round of ballots into a winner.

    Args:
        votes: Mapping of voter id -> target id (or NO_EXPULSION).
        rng: Random source for tie-breaking; a fresh one if omitted.

    Returns:
        VoteResult with the winner, whether it came from a tie, and the
        full tied set (empty when there was no tie).
    """
    counts = count_votes(votes)
    if not counts:
        return VoteResult(counts=counts)

    max_votes = max(counts.values())
    top = [target for target, count in counts.items() if count == max_votes]

    if len(top) == 1:
        return VoteResult(winner=top[0], counts=counts)

    rng = rng or random.Random()
    return VoteResult(
        winner=rng.choice(top),
        tied=True,
        tied_players=top,
        counts=counts,
    )
