"""Demo scenario - a city's passive income over one simulated day.

A player owns a few properties, auto-collects every 15 minutes of game
time, buys a Luxury plan at noon and spends on an upgrade in the
evening. State lives in a JSON file per account; every call goes
through load/execute/persist, so the day can be stopped and resumed.

Run: python examples/idle_city.py [state_dir]
"""

import logging
import sys
import tempfile

from tick_economy import (
    EconomyConfig,
    EconomyService,
    InsufficientFundsError,
    JsonFileStore,
    PlanTier,
    property_sources,
)

ACCOUNT = "mayor"
START = 1_700_000_000.0
STEP = 15 * 60.0
DAY = 24 * 3600.0


def main(state_dir: str) -> None:
    logging.basicConfig(level=logging.INFO, format="%(levelname)s %(name)s: %(message)s")
    service = EconomyService(
        JsonFileStore(state_dir),
        EconomyConfig(starting_balance=500, history_limit=100),
    )
    service.add_sources(
        ACCOUNT,
        property_sources(["apartment", "house", "shop", "restaurant"], START),
        now=START,
    )

    now = START
    while now < START + DAY:
        now += STEP
        service.auto_collect(ACCOUNT, now=now)

        if now == START + DAY / 2:
            service.upgrade(ACCOUNT, PlanTier.LUXURY, 1, now=now)
        if now == START + 20 * 3600:
            try:
                service.spend(ACCOUNT, 25_000, label="factory", now=now)
            except InsufficientFundsError as exc:
                print(f"Factory postponed: {exc}")

    stats = service.stats(ACCOUNT, now=now)
    print(f"Balance after one day: {stats.balance:,.2f}")
    print(f"Earned {stats.total_earned:,.2f}, spent {stats.total_spent:,.2f}")
    print(f"Plan: {stats.tier}, passive income {stats.passive_income_per_hour:,.2f}/h")
    for tx in service.history(ACCOUNT, 5, now=now):
        print(f"  {tx.label:<22} {tx.amount:>10,.2f}")


if __name__ == "__main__":
    if len(sys.argv) > 1:
        main(sys.argv[1])
    else:
        with tempfile.TemporaryDirectory() as tmp:
            main(tmp)
