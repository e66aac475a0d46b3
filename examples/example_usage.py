"""Example: drive a client session without any UI.

If the server is not running the first call fails over to the local cache and
the rest of the session stays offline.
"""

import logging

from pecc_time.session.factory import build_session


def main():
    logging.basicConfig(level=logging.INFO)
    session = build_session()
    store = session.store
    store.subscribe(lambda snap: print(f"[{snap.connection_mode.value}] screen={snap.screen.value}"))

    if not store.login("Bob", "password456"):
        raise SystemExit("Invalid credentials")

    entry = store.toggle_clock(18.4861, -69.9312)
    print(entry.clock_in_location.description, "open" if entry.clock_out is None else "closed")
    print([e.id for e in store.my_time_entries()][:5])


if __name__ == "__main__":
    main()
