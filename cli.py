#!/usr/bin/env python3
"""
Gem Bag Engine - Command Line Interface

Inspect the gem catalog and run seeded simulations of the bag engine.

Usage:
    python cli.py catalog
    python cli.py bag --seed GEMS1 --class knight
    python cli.py simulate --seed GEMS1 --class mage --days 3 --battles 2
    python cli.py upgrades --seed GEMS1 --class rogue
    python cli.py rng --seed GEMS1 --count 20
"""

import argparse
import json
import logging
import sys
import os
from typing import Any, Dict, List

# Add project root to path
sys.path.insert(0, os.path.dirname(os.path.abspath(__file__)))

from packages.gembag import (
    EngineConfig, GemInstance, GemSession, InsufficientResourceError,
    PlayerClass, Random, ShopActionType, ShopHandler, GEM_TEMPLATES, AUGMENTATIONS,
    get_player_class, seed_to_long,
)

logger = logging.getLogger("gembag.cli")

STAMINA_PER_TURN = 3
TURNS_PER_BATTLE = 4
ZENNY_PER_BATTLE = 4


# =============================================================================
# OUTPUT FORMATTING
# =============================================================================

def format_seed_info(seed_string: str, numeric_seed: int) -> str:
    return f"Seed: {seed_string} (numeric: {numeric_seed})"


def format_gem(gem: GemInstance) -> str:
    badge = f" {gem.badge_icon}" if gem.badge_icon else ""
    extras = []
    if gem.duration is not None:
        extras.append(f"{gem.duration} turns")
    if gem.draws_on_play:
        extras.append("draws")
    if gem.defense_bypass:
        extras.append(f"bypass {gem.defense_bypass:.0%}")
    extra = f" ({', '.join(extras)})" if extras else ""
    return (
        f"{gem.icon} {gem.name}{badge}: {gem.kind.value} {gem.value}, "
        f"cost {gem.cost}, mastery {gem.mastery_snapshot}%{extra}"
    )


def format_zones(session: GemSession) -> str:
    pool = session.pool
    return (
        f"bag={len(pool.bag)} hand={len(pool.hand)} "
        f"discard={len(pool.discard_pile)} played={len(pool.played)}"
    )


def _make_session(args) -> GemSession:
    config = EngineConfig.from_env(args.env_file) if args.env_file else EngineConfig.from_env()
    session = GemSession(seed=args.seed.upper(), config=config)
    session.new_run(get_player_class(args.player_class))
    return session


# =============================================================================
# COMMANDS
# =============================================================================

def cmd_catalog(args) -> int:
    """List gem templates and augmentations."""
    if args.json:
        data = {
            "gems": {
                t.id: {
                    "name": t.name, "color": t.color.value, "kind": t.kind.value,
                    "value": t.value, "cost": t.cost, "duration": t.duration,
                    "base_mastery": t.base_mastery,
                }
                for t in GEM_TEMPLATES.values()
            },
            "augmentations": {a.id: a.description for a in AUGMENTATIONS.values()},
        }
        print(json.dumps(data, indent=2))
        return 0

    print("Gem templates:")
    for t in GEM_TEMPLATES.values():
        duration = f", {t.duration} turns" if t.duration else ""
        print(f"  {t.id:<18} {t.icon} {t.name:<16} {t.color.value:<5} {t.kind.value:<6} "
              f"{t.value:>3} cost {t.cost}{duration} [{t.base_mastery}%]")
    print()
    print("Augmentations:")
    for a in AUGMENTATIONS.values():
        print(f"  {a.id:<10} {a.badge_icon} {a.description}")
    return 0


def cmd_bag(args) -> int:
    """Show the starting bag for a class and seed."""
    session = _make_session(args)
    bag = session.pool.bag

    if args.json:
        print(json.dumps([g.to_dict() for g in bag], indent=2))
        return 0

    print(format_seed_info(args.seed.upper(), session.seed))
    print(f"Starting bag for {session.player_class.value} ({len(bag)} gems):")
    for i, gem in enumerate(bag):
        print(f"  {i:2}: {format_gem(gem)}")
    return 0


def cmd_upgrades(args) -> int:
    """Draw a hand and list the upgrade options for each gem."""
    session = _make_session(args)
    if args.unlock_all:
        for template_id, template in GEM_TEMPLATES.items():
            if session.unlock_gate.is_eligible(template, session.player_class):
                if not session.registry.is_unlocked(template_id, session.player_class):
                    session.wallet.earn(session.config.unlock_cost)
                    session.unlock(template_id)
    session.start_battle()

    result: Dict[str, Any] = {}
    for gem in session.pool.hand:
        options = session.upgrade_options(gem.instance_id)
        result[gem.instance_id] = options
        if not args.json:
            print(format_gem(gem))
            for i, option in enumerate(options):
                print(f"  {i}: [{option.upgrade_kind.value}] {format_gem(option.candidate)}")

    if args.json:
        data = {
            iid: [{"kind": o.upgrade_kind.value, "candidate": o.candidate.to_dict()} for o in opts]
            for iid, opts in result.items()
        }
        print(json.dumps(data, indent=2))
    return 0


def _choose_play(session: GemSession, stamina: int) -> List[str]:
    """Greedy pick: highest mastery first while stamina lasts."""
    chosen = []
    for gem in sorted(session.pool.hand, key=lambda g: (-g.mastery_snapshot, g.cost)):
        if gem.cost <= stamina:
            chosen.append(gem.instance_id)
            stamina -= gem.cost
    return chosen


def cmd_simulate(args) -> int:
    """Play seeded days of battles and shop visits."""
    session = _make_session(args)
    counts: Dict[str, int] = {}
    session.bus.subscribe(None, lambda ev: counts.__setitem__(ev.type.value, counts.get(ev.type.value, 0) + 1))

    print(format_seed_info(args.seed.upper(), session.seed))
    print(f"Class: {session.player_class.value}")

    for day in range(1, args.days + 1):
        for battle in range(1, args.battles + 1):
            session.start_battle()
            successes = failures = 0
            for _ in range(TURNS_PER_BATTLE):
                stamina = STAMINA_PER_TURN
                chosen = _choose_play(session, stamina)
                if not chosen:
                    session.discard([g.instance_id for g in session.pool.hand])
                else:
                    try:
                        outcomes = session.play(chosen, stamina)
                    except InsufficientResourceError as e:
                        logger.warning("Play rejected: %s", e)
                        outcomes = []
                    successes += sum(1 for o in outcomes if o.success)
                    failures += sum(1 for o in outcomes if not o.success)
                session.refill_hand()
            session.wallet.earn(ZENNY_PER_BATTLE)
            print(f"Day {day} battle {battle}: {successes} hits, {failures} misses, {format_zones(session)}")

        _visit_shop(session)
        session.end_period()

    print()
    print("Mastery:")
    for template_id, value in sorted(session.ledger.recorded().items()):
        print(f"  {template_id:<18} {value}%")
    print(f"Zenny: {session.wallet.zenny}")
    print(f"Collection: {session.pool.collection_size} gems")

    if args.json:
        print(json.dumps({"events": counts, "state": session.export_state()}, indent=2, default=str))
    elif args.verbose:
        print("Events:")
        for name, n in sorted(counts.items()):
            print(f"  {name:<16} {n}")
    return 0


def _visit_shop(session: GemSession) -> None:
    """Spend zenny on one upgrade if possible, otherwise buy a gem."""
    actions = ShopHandler.get_available_actions(session)
    for preferred in (ShopActionType.UPGRADE_GEM, ShopActionType.BUY_RANDOM_GEM):
        for action in actions:
            if action.action_type == preferred:
                result = ShopHandler.execute_action(action, session)
                print(f"  Shop: {result.message}")
                return


def cmd_rng(args) -> int:
    """Display the RNG sequence for a seed."""
    seed_string = args.seed.upper()
    seed = seed_to_long(seed_string)
    rng = Random(seed)

    print(format_seed_info(seed_string, seed))
    print(f"First {args.count} random_int(99) values:")
    for i in range(args.count):
        print(f"  {i}: {rng.random_int(99)}")
    print(f"\nRNG counter after {args.count} calls: {rng.counter}")
    return 0


# =============================================================================
# MAIN
# =============================================================================

def main():
    parser = argparse.ArgumentParser(
        description="Gem Bag Engine - CLI for inspecting and simulating gem bags",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
Examples:
  %(prog)s catalog
  %(prog)s bag --seed GEMS1 --class knight
  %(prog)s simulate --seed GEMS1 --class mage --days 3 --battles 2 -v
  %(prog)s upgrades --seed GEMS1 --class rogue --unlock-all
  %(prog)s rng --seed GEMS1 --count 20
        """
    )
    parser.add_argument("--log-level", default="WARNING", help="Logging level (DEBUG, INFO, ...)")

    subparsers = parser.add_subparsers(dest="command", help="Available commands")
    classes = [c.value for c in PlayerClass]

    def add_run_args(p):
        p.add_argument("--seed", "-s", default="GEMS", help="Run seed (e.g., GEMS1)")
        p.add_argument("--class", "-c", dest="player_class", default="knight", choices=classes, help="Player class")
        p.add_argument("--env-file", help="Path to a .env file with GEMBAG_* overrides")
        p.add_argument("--json", "-j", action="store_true", help="Output in JSON format")

    catalog_parser = subparsers.add_parser("catalog", help="List gem templates and augmentations")
    catalog_parser.add_argument("--json", "-j", action="store_true", help="Output in JSON format")

    bag_parser = subparsers.add_parser("bag", help="Show the starting bag")
    add_run_args(bag_parser)

    upgrades_parser = subparsers.add_parser("upgrades", help="Show upgrade options for a drawn hand")
    add_run_args(upgrades_parser)
    upgrades_parser.add_argument("--unlock-all", action="store_true", help="Unlock every eligible gem first")

    simulate_parser = subparsers.add_parser("simulate", help="Simulate days of battles")
    add_run_args(simulate_parser)
    simulate_parser.add_argument("--days", "-d", type=int, default=3, help="Number of days")
    simulate_parser.add_argument("--battles", "-b", type=int, default=2, help="Battles per day")
    simulate_parser.add_argument("--verbose", "-v", action="store_true", help="Print event counts")

    rng_parser = subparsers.add_parser("rng", help="Show the RNG sequence")
    rng_parser.add_argument("--seed", "-s", required=True, help="Run seed")
    rng_parser.add_argument("--count", "-n", type=int, default=20, help="Number of values to show")

    args = parser.parse_args()

    logging.basicConfig(
        level=getattr(logging, args.log_level.upper(), logging.WARNING),
        format='%(asctime)s - %(name)s - %(levelname)s - %(message)s',
    )

    if not args.command:
        parser.print_help()
        return 1

    commands = {
        "catalog": cmd_catalog,
        "bag": cmd_bag,
        "upgrades": cmd_upgrades,
        "simulate": cmd_simulate,
        "rng": cmd_rng,
    }

    handler = commands.get(args.command)
    if handler:
        return handler(args)
    else:
        parser.print_help()
        return 1


if __name__ == "__main__":
    sys.exit(main())
