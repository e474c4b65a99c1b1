from schoolbus.services.roster_seeding import SeedResult, seed_passengers
from schoolbus.services.roster_store import RosterStore

__all__ = ["RosterStore", "SeedResult", "seed_passengers"]
