#!/usr/bin/env python3
"""
trajtrust CLI — Offline reputation queries over logged interactions.

Commands:
    score       - Reputation of a target as seen by an observer
    select      - Pick the best provider among candidates
    simulate    - Run the round-based simulation over a trajectory CSV or .xlsx file
    similarity  - Trajectory similarity between two vehicles
"""

import argparse
import json
import logging
import sys
from typing import Optional

logger = logging.getLogger(__name__)


def _output(data: dict, args: argparse.Namespace, human_fn=None):
    """Output data as JSON or pretty-printed."""
    if getattr(args, 'json', False):
        print(json.dumps(data, indent=2, default=str))
    elif human_fn:
        human_fn(data)
    else:
        print(json.dumps(data, indent=2, default=str))


def _load_config(args: argparse.Namespace):
    from trajtrust.config import load_config
    return load_config(args.config, gamma=getattr(args, 'gamma', None))


def _build_registry(args: argparse.Namespace):
    """One manager per agent id in the interactions file, fully connected."""
    from trajtrust.ingest import load_interactions
    from trajtrust.opinion import get_combiner
    from trajtrust.registry import AgentRegistry

    config = _load_config(args)
    records = load_interactions(args.interactions)
    registry = AgentRegistry()
    combiner_name = getattr(args, 'combiner', 'local-only')

    ids = sorted({r.sender for r in records} | {r.recipient for r in records})
    for agent_id in ids:
        registry.create(agent_id, config, combiner=get_combiner(combiner_name))
    for record in records:
        registry.get(record.sender).add_interaction(record)
    registry.connect_all()
    logger.debug("loaded %d interactions for %d agents", len(records), len(ids))
    return registry


def _observer(registry, agent_id: str):
    manager = registry.get(agent_id)
    if manager is None:
        raise ValueError(f"unknown observer '{agent_id}'")
    return manager


def _neighbors(args: argparse.Namespace, manager) -> list[str]:
    return args.neighbors if args.neighbors is not None else manager.neighbors


# ─── Commands ──────────────────────────────────────────────────────

def cmd_score(args):
    """Reputation of a target, with the intermediate opinions."""
    registry = _build_registry(args)
    manager = _observer(registry, args.observer)
    neighbors = _neighbors(args, manager)
    breakdown = manager.compute_reputation_debug(args.observer, args.target, neighbors, args.now)

    result = {
        "observer": args.observer,
        "target": args.target,
        "now": args.now,
        "neighbors": neighbors,
        **breakdown.to_dict(),
    }

    def human(d):
        print(f"🔍 {d['observer']} → {d['target']} at t={d['now']}")
        print(f"   Reputation: {d['score']:.6f}")
        if args.debug:
            for key in ("local", "recommended", "final"):
                op = d[key]
                print(f"   {key:<12} b={op['belief']:.6f} d={op['disbelief']:.6f} "
                      f"u={op['uncertainty']:.6f}")

    _output(result, args, human)
    return result


def cmd_select(args):
    """Rank candidates and report the best provider."""
    registry = _build_registry(args)
    manager = _observer(registry, args.observer)
    neighbors = _neighbors(args, manager)
    ranking = manager.rank_providers(args.observer, args.candidates, neighbors, args.now)

    result = {
        "observer": args.observer,
        "selected": ranking[0][0] if ranking else None,
        "ranking": [{"agent_id": a, "reputation": s} for a, s in ranking],
    }

    def human(d):
        if d["selected"] is None:
            print("❌ No candidates")
            return
        print(f"✅ Selected provider: {d['selected']}")
        for i, entry in enumerate(d["ranking"], 1):
            print(f"   {i}. {entry['agent_id']:<20} {entry['reputation']:.6f}")

    _output(result, args, human)
    return result


def cmd_simulate(args):
    """Run the honest/malicious simulation over a trajectory file."""
    from trajtrust.ingest import load_trajectories
    from trajtrust.simulation import Simulation

    config = _load_config(args)
    trajectories = load_trajectories(args.trajectories, road_length=args.road_length)
    sim = Simulation(trajectories, config=config, malicious=args.malicious)
    report = sim.run(args.rounds)
    result = report.to_dict()

    if args.output:
        with open(args.output, 'w') as f:
            f.write(report.render())

    _output(result, args, lambda d: print(report.render()))
    return result


def cmd_similarity(args):
    """Trajectory similarity between two vehicles."""
    from trajtrust.ingest import load_trajectories
    from trajtrust.trajectory import TrajectorySimilarity

    config = _load_config(args)
    trajectories = load_trajectories(args.trajectories, road_length=args.road_length)
    for vid in (args.vehicle_a, args.vehicle_b):
        if vid not in trajectories:
            raise ValueError(f"vehicle '{vid}' not found in {args.trajectories}")

    result = {
        "vehicle_a": args.vehicle_a,
        "vehicle_b": args.vehicle_b,
        **TrajectorySimilarity(config).breakdown(
            trajectories[args.vehicle_a], trajectories[args.vehicle_b]),
    }

    def human(d):
        print(f"🚗 {d['vehicle_a']} vs {d['vehicle_b']}")
        print(f"   Speed diff:     {d['speed_difference']:.6f}")
        print(f"   Location diff:  {d['location_difference']:.6f}")
        print(f"   Direction diff: {d['direction_difference']:.6f}")
        print(f"   Similarity:     {d['similarity']:.6f}")

    _output(result, args, human)
    return result


# ─── Parser ────────────────────────────────────────────────────────

def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="trajtrust",
        description="trajtrust — reputation for mobile agents",
        formatter_class=argparse.RawDescriptionHelpFormatter,
    )
    parser.add_argument("--json", action="store_true", help="Machine-readable JSON output")
    parser.add_argument("-c", "--config", help="Config JSON file (default: $TRAJTRUST_CONFIG)")
    parser.add_argument("-v", "--verbose", action="store_true", help="Debug logging")
    parser.add_argument("--log-json", action="store_true", help="Structured JSON log lines")

    sub = parser.add_subparsers(dest="command", help="Available commands")

    # score
    p = sub.add_parser("score", help="Reputation of a target as seen by an observer")
    p.add_argument("observer", help="Observer agent ID")
    p.add_argument("target", help="Target agent ID")
    p.add_argument("-i", "--interactions", required=True, help="Interactions JSON file")
    p.add_argument("-n", "--neighbors", nargs="*", help="Neighbor IDs (default: all known agents)")
    p.add_argument("-t", "--now", type=float, required=True, help="Logical query time")
    p.add_argument("--gamma", type=float, help="Override gamma")
    p.add_argument("--combiner", default="local-only",
                   choices=["local-only", "weighted-average"], help="Opinion fusion policy")
    p.add_argument("--debug", action="store_true", help="Show intermediate opinions")

    # select
    p = sub.add_parser("select", help="Pick the best provider among candidates")
    p.add_argument("observer", help="Observer agent ID")
    p.add_argument("candidates", nargs="*", help="Candidate provider IDs")
    p.add_argument("-i", "--interactions", required=True, help="Interactions JSON file")
    p.add_argument("-n", "--neighbors", nargs="*", help="Neighbor IDs (default: all known agents)")
    p.add_argument("-t", "--now", type=float, required=True, help="Logical query time")
    p.add_argument("--combiner", default="local-only",
                   choices=["local-only", "weighted-average"], help="Opinion fusion policy")

    # simulate
    p = sub.add_parser("simulate", help="Run the round-based simulation")
    p.add_argument("trajectories", help="Trajectory CSV or .xlsx file")
    p.add_argument("-m", "--malicious", nargs="*", default=[], help="Malicious vehicle IDs")
    p.add_argument("-r", "--rounds", type=int, help="Number of rounds (default: shortest trajectory)")
    p.add_argument("--road-length", type=float, default=352.0, help="Road length in metres")
    p.add_argument("-o", "--output", help="Write the text report to a file")

    # similarity
    p = sub.add_parser("similarity", help="Trajectory similarity between two vehicles")
    p.add_argument("trajectories", help="Trajectory CSV or .xlsx file")
    p.add_argument("vehicle_a", help="First vehicle ID")
    p.add_argument("vehicle_b", help="Second vehicle ID")
    p.add_argument("--road-length", type=float, default=352.0, help="Road length in metres")

    return parser


def main(argv: Optional[list[str]] = None) -> Optional[dict]:
    """CLI entry point. Returns result dict for testing."""
    from trajtrust.errors import TrajTrustError
    from trajtrust.log import setup_logging

    parser = build_parser()
    args = parser.parse_args(argv)

    if not args.command:
        parser.print_help()
        sys.exit(1)

    setup_logging("DEBUG" if args.verbose else "WARNING", json_output=args.log_json)

    commands = {
        "score": cmd_score,
        "select": cmd_select,
        "simulate": cmd_simulate,
        "similarity": cmd_similarity,
    }

    try:
        return commands[args.command](args)
    except FileNotFoundError as e:
        print(f"❌ File not found: {e}", file=sys.stderr)
        sys.exit(1)
    except (TrajTrustError, ValueError) as e:
        print(f"❌ Error: {e}", file=sys.stderr)
        sys.exit(1)


if __name__ == "__main__":
    main()
