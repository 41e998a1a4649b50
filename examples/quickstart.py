#!/usr/bin/env python3
"""trajtrust quickstart — rank providers after a few rounds of interactions.

Run:  python3 examples/quickstart.py
"""
from trajtrust import AgentRegistry, Interaction, ReputationConfig, Vector

cfg = ReputationConfig(gamma=0.5, t_recent=3.0)
registry = AgentRegistry()
for vid in ("car-1", "car-2", "car-3", "car-4"):
    registry.create(vid, cfg)
registry.connect_all()

# car-3 misbehaves, everyone else serves data correctly
lane = (Vector(speed=13.0, location=0.4, direction=0.0),)
for t in range(5):
    for requester in registry:
        for provider in registry:
            if provider == requester:
                continue
            pos, neg = (0, 2) if provider == "car-3" else (1, 0)
            registry.get(requester).add_interaction(Interaction(
                sender=requester, recipient=provider,
                pos_events=pos, neg_events=neg,
                timestamp=float(t), comm_quality=0.9,
                sender_trajectory=lane, recipient_trajectory=lane,
            ))

me = registry.get("car-1")
for provider, score in me.rank_providers("car-1", ["car-2", "car-3", "car-4"], me.neighbors, now=4.0):
    print(f"📊 {provider}: {score:.4f}")

best = me.select_optimal_provider("car-1", ["car-3", "car-2", "car-4"], me.neighbors, now=4.0)
print(f"\n✅ Best provider for car-1: {best}")
