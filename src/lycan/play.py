#!/usr/bin/env python
"""Simulated lycan games with stub players.

Usage:
    lycan                              # One narrated game, random seed
    lycan --seed 42 --players 10       # Reproducible game
    lycan --games 500                  # Stress test, winner distribution
    lycan --config rules.yaml          # Custom ruleset
"""

import argparse
import logging
import random
from collections import Counter
from typing import Optional

from rich.console import Console
from rich.panel import Panel
from rich.table import Table

from lycan.ai.stub_ai import StubPlayer
from lycan.engine.session import GameSession
from lycan.events.game_events import VictoryResult
from lycan.models.config import GameConfig, default_config, load_config
from lycan.validation import ValidationError

# Safety net for simulations that never converge
MAX_ROUNDS: int = 50


def _recorded_victory(session: GameSession) -> VictoryResult:
    state = session.state
    return VictoryResult(
        has_winner=True,
        winners=state.winners,
        winning_team=state.winning_team,
        reason="Ended by the silver bullet",
    )


def play_game(
    seed: int,
    config: GameConfig,
    console: Optional[Console] = None,
) -> VictoryResult:
    """Play one game to the end with stub players.

    Args:
        seed: Seed for character distribution, stub choices and tie-breaks.
        config: Ruleset; number_of_players sets the table size.
        console: Rich console for narration; silent if None.

    Returns:
        The final VictoryResult (has_winner False if MAX_ROUNDS ran out).
    """
    names = [f"Player {i + 1}" for i in range(config.number_of_players)]
    session = GameSession.new(names, config=config, seed=seed, strict=True)
    stub = StubPlayer(seed=seed)
    stub.setup(session)

    names_by_id = {p.id: p.name for p in session.state.players}

    def say(text: str) -> None:
        if console is not None:
            console.print(text)

    if console is not None:
        table = Table(title=f"Seed {seed}")
        table.add_column("Player")
        table.add_column("Character")
        table.add_column("Team")
        for player in session.state.players:
            table.add_row(player.name, player.display_name, player.team.value)
        console.print(table)

    victory = VictoryResult()
    for _ in range(MAX_ROUNDS):
        night = session.state.night
        report = session.run_night(stub.night_actions(session))
        say(f"\n[bold blue]Night {night}[/bold blue]")
        for message in report.result.messages:
            say(f"  {message}")
        for dead_id in report.result.dead_players:
            reason = report.result.death_reasons.get(dead_id)
            say(f"  [red]{names_by_id[dead_id]} died[/red] ({reason.description if reason else 'unknown'})")

        victory = report.victory
        if victory.has_winner:
            break

        if session.state.pending_silver_bullet_id is not None:
            session.silver_bullet_shot(stub.silver_bullet_target(session))
            if session.state.is_game_ended:
                victory = _recorded_victory(session)
                break

        say(f"[bold yellow]Day {night}[/bold yellow]")
        if session.state.mayor_id is None or session.needs_mayor_reelection():
            election = session.elect_mayor(stub.ballots(session))
            if election.winner is not None:
                say(f"  {names_by_id[election.winner]} was elected mayor.")

        vote, expulsion = session.run_expulsion_vote(
            stub.ballots(session), mayor_tie_break=stub.mayor_tie_break
        )
        if expulsion.expelled is None:
            say("  Nobody was expelled." + (" (tie)" if vote.tied else ""))
        else:
            votes = vote.counts.get(expulsion.expelled, 0)
            suffix = " (mayor decided)" if vote.mayor_decided else ""
            say(f"  {names_by_id[expulsion.expelled]} was expelled with {votes} votes.{suffix}")

        victory = expulsion.victory
        if victory.has_winner:
            break

        if session.state.pending_silver_bullet_id is not None:
            result = session.silver_bullet_shot(stub.silver_bullet_target(session))
            for message in result.messages:
                say(f"  {message}")
            if session.state.is_game_ended:
                victory = _recorded_victory(session)
                break

    if console is not None:
        winners = ", ".join(names_by_id[w] for w in victory.winners) or "nobody"
        console.print(Panel(
            f"[bold]Game Over[/bold]\n\n{victory.reason}\nWinners: {winners}",
            title="Result",
        ))
    return victory


def run_stress_test(num_games: int, seed_base: int, config: GameConfig) -> None:
    """Run many silent games and print the winner distribution."""
    console = Console()
    teams: list[str] = []
    errors: list[dict] = []

    for i in range(num_games):
        seed = seed_base + i
        try:
            victory = play_game(seed, config)
        except ValidationError as e:
            errors.append({"seed": seed, "error": str(e)})
            continue
        teams.append(victory.winning_team.value if victory.winning_team else "UNFINISHED")

    console.print("=" * 60)
    console.print(f"Completed: {len(teams)}")
    console.print(f"Errors: {len(errors)}")
    console.print("\nWinner Distribution:")
    for team, count in sorted(Counter(teams).items()):
        pct = (count / num_games) * 100
        console.print(f"  {team}: {count} ({pct:.1f}%)")

    if errors:
        console.print(f"\nErrors ({len(errors)}):")
        for e in errors[:5]:
            console.print(f"  Seed {e['seed']}: {e['error']}")
    console.print("=" * 60)


def main() -> int:
    """Main entry point."""
    parser = argparse.ArgumentParser(
        description="Lycan - werewolf party game rules engine",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog=__doc__,
    )
    parser.add_argument("--seed", type=int, default=None, help="Random seed for reproducible games")
    parser.add_argument("--players", type=int, default=None, help="Number of players (overrides config)")
    parser.add_argument("--games", type=int, default=None, help="Run N silent games and report winners")
    parser.add_argument("--config", type=str, default=None, help="YAML ruleset file")
    parser.add_argument("--verbose", action="store_true", help="Debug logging from the engine")

    args = parser.parse_args()

    logging.basicConfig(
        level=logging.DEBUG if args.verbose else logging.WARNING,
        format="%(name)s: %(message)s",
    )

    if args.seed is None:
        args.seed = random.randint(1, 1000000)

    if args.games is not None and args.games < 1:
        print("Error: --games must be a positive integer")
        return 1

    config = load_config(args.config) if args.config else default_config()
    if args.players is not None:
        config = config.model_copy(update={"number_of_players": args.players})

    if args.games is not None:
        run_stress_test(args.games, seed_base=args.seed, config=config)
    else:
        play_game(args.seed, config, console=Console())
    return 0


if __name__ == "__main__":
    raise SystemExit(main())
