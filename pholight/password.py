"""
PhoLight - Host Password Authority
====================================
Owns the single shared secret that turns a connection into the host.

Security model:
- One process-wide password, no user accounts
- Human-readable format (Adjective + Noun + 3 digits, e.g. "HappyParty482")
  so it can be read aloud or typed on a phone
- Fixed lifetime (24 hours by default) from the moment it is generated
- Expiry is checked lazily: the first login attempt after expiry rotates
  the secret and fails, even if it carried the old, correct password
- An explicit rotate() is triggered when the host logs out

The password is not meant to resist offline guessing. It only has to
hold for the length of a party.
"""

import hmac
import logging
import random
import secrets
from datetime import datetime, timedelta, timezone
from typing import Callable


logger = logging.getLogger("pholight.password")

ADJECTIVES = [
    "Happy", "Bright", "Cool", "Wild", "Fun",
    "Epic", "Amazing", "Awesome", "Super", "Magic",
]
NOUNS = [
    "Party", "Light", "Show", "Night", "Dance",
    "Beat", "Wave", "Glow", "Spark", "Flash",
]

PASSWORD_DURATION = timedelta(hours=24)


def _utcnow() -> datetime:
    return datetime.now(timezone.utc)


class PasswordAuthority:
    """
    Generates, validates and rotates the shared host password.

    A fresh secret is generated on construction, so an authority is always
    holding exactly one valid (or lazily-expired) secret.

    Attributes:
        duration: Lifetime of each generated secret.
    """

    def __init__(
        self,
        duration: timedelta = PASSWORD_DURATION,
        clock: Callable[[], datetime] = _utcnow,
        rng: random.Random | None = None,
    ):
        """
        Initialize the authority and generate the first secret.

        Args:
            duration: How long a secret stays valid after generation.
            clock:    Returns the current time as an aware datetime.
            rng:      Random source for word/number picks. Defaults to
                      the OS-backed secrets.SystemRandom().
        """
        self.duration = duration
        self._clock = clock
        self._rng = rng or secrets.SystemRandom()
        self._secret = ""
        self._expires_at: datetime | None = None
        self.initialize()

    @property
    def secret(self) -> str:
        """The current password."""
        return self._secret

    @property
    def expires_at(self) -> datetime:
        """Absolute time after which the current password is rejected."""
        return self._expires_at

    @property
    def is_expired(self) -> bool:
        return self._clock() > self._expires_at

    def generate(self) -> str:
        """
        Build a new human-readable password.

        Returns:
            One adjective, one noun and a number in [100, 999], joined
            with no separator. Example: "EpicGlow731"
        """
        adjective = self._rng.choice(ADJECTIVES)
        noun = self._rng.choice(NOUNS)
        number = self._rng.randint(100, 999)
        return f"{adjective}{noun}{number}"

    def initialize(self) -> str:
        """
        Replace the current secret and restart its lifetime.

        Returns:
            The newly generated secret.
        """
        self._secret = self.generate()
        self._expires_at = self._clock() + self.duration
        logger.info(f"Generated new host password: {self._secret}")
        logger.info(f"Password expires at: {self._expires_at.isoformat()}")
        return self._secret

    def validate(self, candidate: str | None) -> bool:
        """
        Check a login attempt against the current secret.

        If the secret has expired, it is rotated as a side effect and the
        attempt fails regardless of what was supplied. Callers must then
        request the new password and try again.

        Args:
            candidate: The password supplied by the client (may be None).

        Returns:
            True only if the secret is still live and candidate matches it.
        """
        if self.is_expired:
            logger.info("Password expired, generating new one")
            self.initialize()
            return False

        if not candidate or not isinstance(candidate, str):
            return False

        return hmac.compare_digest(
            candidate.encode("utf-8"), self._secret.encode("utf-8")
        )

    def rotate(self) -> str:
        """Invalidate the current secret immediately (used on host logout)."""
        return self.initialize()
