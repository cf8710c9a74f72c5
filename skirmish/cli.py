"""
Skirmish CLI - Command-line interface for the engine.

Usage:
    skirmish demo [--seed N] [--name NAME] [--max-turns N] [--save PATH] [--enemy-policy P]
    skirmish resume <save_file> [--seed N] [--max-turns N] [--save PATH]
    skirmish validate

The demo plays the Ono rule set non-interactively: the hero is driven by
the heuristic policy, enemies by the rule set's policy.
"""

import argparse
import logging
import sys

from .bots import FirstAllowedPolicy, HeuristicPolicy, RandomPolicy
from .config import configure_logging, get_settings
from .engine_core.dice import Dice
from .engine_core.world import World
from .errors import SkirmishError
from .games.ono import EventFormatter, NarrativeSink, create_hero, create_ono_ruleset
from .rules import validate_ruleset

logger = logging.getLogger(__name__)

ENEMY_POLICIES = {
    "first": lambda seed: FirstAllowedPolicy(),
    "random": lambda seed: RandomPolicy(seed),
    "heuristic": lambda seed: HeuristicPolicy(),
}


def main(argv=None):
    """Main CLI entry point."""
    parser = argparse.ArgumentParser(
        description="Skirmish - Turn-based combat engine",
        prog="skirmish",
    )
    subparsers = parser.add_subparsers(dest="command", help="Commands")

    # Demo command
    demo_parser = subparsers.add_parser("demo", help="Play the Ono demo automatically")
    demo_parser.add_argument("--seed", type=int, default=None, help="Dice seed")
    demo_parser.add_argument("--name", default="Hero", help="Hero name")
    _add_play_arguments(demo_parser)

    # Resume command
    resume_parser = subparsers.add_parser("resume", help="Continue a saved Ono world")
    resume_parser.add_argument("save_file", help="Path to a saved world JSON file")
    resume_parser.add_argument("--seed", type=int, default=None, help="Dice seed")
    _add_play_arguments(resume_parser)

    # Validate command
    subparsers.add_parser("validate", help="Validate the Ono rule set")

    args = parser.parse_args(argv)
    settings = get_settings()
    configure_logging(settings)
    if getattr(args, "seed", None) is None and args.command in ("demo", "resume"):
        args.seed = settings.seed

    if args.command == "demo":
        return cmd_demo(args)
    elif args.command == "resume":
        return cmd_resume(args)
    elif args.command == "validate":
        return cmd_validate(args)
    else:
        parser.print_help()
        sys.exit(1)


def _add_play_arguments(subparser):
    subparser.add_argument("--max-turns", type=int, default=200, help="Stop after this many turns")
    subparser.add_argument("--save", default=None, help="Write the final world to this JSON file")
    subparser.add_argument(
        "--enemy-policy",
        choices=sorted(ENEMY_POLICIES),
        default="first",
        help="How enemies pick their moves",
    )


def _build_world(args) -> tuple:
    ruleset = create_ono_ruleset(enemy_policy=ENEMY_POLICIES[args.enemy_policy](args.seed))
    sink = NarrativeSink(EventFormatter(ruleset.narrative))
    return ruleset, sink, Dice(args.seed)


def run_session(world: World, max_turns: int, player_policy=None, write=print) -> str:
    """
    Play until the hero falls or `max_turns` turns have been played.

    A won encounter is immediately followed by a fresh one.
    Returns "defeat" or "unfinished".
    """
    player_policy = player_policy or HeuristicPolicy()
    narrative = world.ruleset.narrative
    turns = 0
    while turns < max_turns:
        if world.encounter is None:
            if world.is_player_defeated():
                write(narrative.get("game_over", "Game over."))
                return "defeat"
            if world.last_player_won:
                write(narrative.get("encounter_complete", "Encounter complete!"))
            world.start_encounter()
            continue

        actor = world.current_actor()
        if actor is world.player and not world.is_defeated(actor):
            moves = world.allowed_moves(actor, include_unaffordable=False)
            if moves:
                decision = player_policy.select_move(world, actor, moves)
                world.play_turn(decision.move.kind, decision.move.target)
            else:
                write(f"{actor.name} has no move and waits.")
                world.pass_turn()
        else:
            world.play_turn()
        turns += 1

    if world.encounter is None and world.is_player_defeated():
        write(narrative.get("game_over", "Game over."))
        return "defeat"
    return "unfinished"


def _finish(world: World, outcome: str, args):
    player = world.player
    logger.info("Session finished: %s", outcome)
    print(f"\nResult: {outcome}")
    if player is not None:
        stats = ", ".join(f"{k}={v}" for k, v in player.num_attrs.items())
        print(f"{player.name}: {stats}")
    if args.save:
        with open(args.save, "w", encoding="utf-8") as f:
            f.write(world.to_json())
        print(f"World saved to {args.save}")


def cmd_demo(args):
    """Play a fresh Ono session."""
    ruleset, sink, dice = _build_world(args)
    world = World(ruleset, sink=sink, dice=dice)
    create_hero(world, args.name)
    outcome = run_session(world, args.max_turns)
    _finish(world, outcome, args)
    return 0


def cmd_resume(args):
    """Continue a saved Ono session."""
    ruleset, sink, dice = _build_world(args)
    try:
        with open(args.save_file, "r", encoding="utf-8") as f:
            world = World.from_json(f.read(), ruleset, sink=sink, dice=dice)
    except FileNotFoundError:
        print(f"Error: File not found: {args.save_file}")
        sys.exit(1)
    except SkirmishError as e:
        print(f"Error: {e}")
        sys.exit(1)

    for warning in world.load_warnings:
        print(f"Warning: {warning}")
    if world.player is None:
        print("Error: saved world has no player")
        sys.exit(1)

    outcome = run_session(world, args.max_turns)
    _finish(world, outcome, args)
    return 0


def cmd_validate(args):
    """Validate the Ono rule set."""
    result = validate_ruleset(create_ono_ruleset())
    if result.valid:
        print("Rule set is valid")
    else:
        print("Rule set has errors:")
        for error in result.errors:
            print(f"  - {error}")
    for warning in result.warnings:
        print(f"  warning: {warning}")
    if not result.valid:
        sys.exit(1)
    return 0


if __name__ == "__main__":
    main()
