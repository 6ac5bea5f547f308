"""Ready-made keys for settings most apps share."""

from __future__ import annotations

from prefspace.keys import KeyGroup


class AppKeys(KeyGroup):
    """Common application settings, stored under the host namespace.

    Like every group, these keys get a prefix: with host id
    ``com.acme.app`` the haptics flag lives at
    ``com.acme.app.defaults.settingsHapticsEnabled``.  Key prefixes are never
    empty, so a bare ``settingsHapticsEnabled`` entry written by some other
    program is not visible through this group.  Read such entries from the
    store directly, e.g. ``prefs.store_for(AppKeys).get_bool("settingsHapticsEnabled")``.
    """

    #: Whether haptic feedback is enabled (bool).
    haptics_enabled = "settingsHapticsEnabled"

    #: Whether audio effects are enabled (bool).
    audio_effects_enabled = "settingsAudioEffectsEnabled"

    #: Last navigation path of the app (structured, e.g. ``list[str]``).
    navigation_path = "storedNavigationPath"
