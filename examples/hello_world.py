"""
prefspace — Hello World

Declare keys once, read and write them with types, and let the library
take care of key prefixes and serialization.
"""

from enum import auto

from pydantic import BaseModel

from prefspace import Defaults, KeyGroup, namespace
from prefspace.factory import memory_store_factory

# ─── Your keys ───


class Settings(KeyGroup):
    theme = auto()
    volume = auto()
    profile = auto()


@namespace(prefix="com.acme.player", store="player")
class PlayerKeys(KeyGroup):
    last_track = "lastTrack"


class Profile(BaseModel):
    name: str
    age: int


def main():
    # ──────────────────────────────────────
    #  1. Create the front door
    # ──────────────────────────────────────
    prefs = Defaults(
        host_namespace_id="com.acme.app",
        store_factory=memory_store_factory(),
        debug=True,
    )

    # ──────────────────────────────────────
    #  2. Register defaults
    # ──────────────────────────────────────
    prefs.register_defaults(
        Settings,
        {Settings.theme: "light", Settings.profile: Profile(name="John", age=30)},
    )

    print(f"theme (default)  = {prefs.get(Settings.theme, str)}")
    print(f"volume (unset)   = {prefs.get(Settings.volume, int)}")
    print(f"profile          = {prefs.get(Settings.profile, Profile)}")

    # ──────────────────────────────────────
    #  3. Write values
    # ──────────────────────────────────────
    prefs.set(Settings.theme, "dark")
    prefs.set(Settings.volume, 7)
    prefs.set(Settings.profile, Profile(name="Ada", age=36))
    prefs.set(PlayerKeys.last_track, "track-42")

    print(f"\ntheme key        = {prefs.physical_key(Settings.theme)}")
    print(f"last track key   = {prefs.physical_key(PlayerKeys.last_track)}")

    print("\n--- Settings namespace ---")
    prefs.print_all(Settings)
    print("\n--- Player namespace ---")
    prefs.print_all(PlayerKeys)

    # ──────────────────────────────────────
    #  4. Clean up
    # ──────────────────────────────────────
    removed = prefs.delete_all(Settings)
    print(f"\nremoved {removed} keys; theme is back to {prefs.get(Settings.theme, str)!r}")
    prefs.close()


if __name__ == "__main__":
    main()
