"""Client-side session lifecycle.

The client only parses the token payload, it never checks the signature.
``precheck_token`` is a convenience for the UI (show the signed-in screens,
log out on time); the backend's ``verify_token`` is the only authoritative
check for protected operations. A tampered token that parses cleanly passes
here and is rejected by the server.
"""
import logging
import threading
import time
from typing import Callable, MutableMapping, Optional

import jwt

logger = logging.getLogger(__name__)

ADMIN_KIND = "admin"
USER_KIND = "user"

KIND_MARKERS = {
    ADMIN_KIND: ("role", "admin"),
    USER_KIND: ("type", "user"),
}


def decode_token_payload(token) -> Optional[dict]:
    """Parse the payload of a JWT. Returns None if it is not structurally valid."""
    if not isinstance(token, str):
        return None
    try:
        # Claims are left to precheck_token
        return jwt.decode(token, options={"verify_signature": False})
    except jwt.InvalidTokenError:
        return None


def precheck_token(token, kind: str, now: float) -> Optional[dict]:
    """Payload of a token that parses, carries the kind marker and has not expired."""
    payload = decode_token_payload(token)
    if payload is None:
        return None

    marker, value = KIND_MARKERS[kind]
    if payload.get(marker) != value:
        return None

    exp = payload.get("exp")
    if isinstance(exp, bool) or not isinstance(exp, (int, float)):
        return None
    if now >= exp:
        return None
    return payload


def _daemon_timer(delay: float, callback: Callable[[], None]):
    timer = threading.Timer(delay, callback)
    timer.daemon = True
    return timer


class SessionLifecycle:
    """Holds one kind of session token and logs it out when it expires.

    ``storage`` is any mutable mapping the UI reads the token from.
    ``timer_factory(delay, callback)`` must return an object with
    ``start()`` and ``cancel()``; ``clock()`` returns epoch seconds.
    """

    def __init__(self, kind: str, storage: MutableMapping, storage_key: str,
                 clock: Callable[[], float] = time.time,
                 timer_factory: Callable = _daemon_timer):
        self.kind = kind
        self.storage = storage
        self.storage_key = storage_key
        self.clock = clock
        self.timer_factory = timer_factory
        self._lock = threading.RLock()
        self._timer = None
        self._armed_token = None
        self._generation = 0
        self._listeners = []

    @property
    def token(self) -> Optional[str]:
        return self.storage.get(self.storage_key)

    @property
    def payload(self) -> Optional[dict]:
        return precheck_token(self.token, self.kind, self.clock())

    @property
    def is_authenticated(self) -> bool:
        return self.payload is not None

    @property
    def armed(self) -> bool:
        return self._timer is not None

    def on_change(self, listener: Callable[[str], None]) -> None:
        self._listeners.append(listener)

    def restore(self) -> Optional[dict]:
        """Check the stored token on load. Anything unusable is cleared silently."""
        with self._lock:
            token = self.token
            if token is None:
                self._disarm()
                return None

            payload = precheck_token(token, self.kind, self.clock())
            if payload is None:
                logger.info("Discarding unusable %s session token", self.kind)
                self._disarm()
                self._drop_token()
                cleared = True
            else:
                cleared = False
                if self._armed_token != token:
                    self._arm(token, payload["exp"])

        if cleared:
            self._notify("logout")
        return payload

    def login(self, token: str) -> Optional[dict]:
        """Store a freshly issued token and replace any pending expiry timer."""
        with self._lock:
            payload = precheck_token(token, self.kind, self.clock())
            if payload is None:
                # Same as having no token at all
                self._disarm()
                self._drop_token()
            else:
                self.storage[self.storage_key] = token
                self._arm(token, payload["exp"])

        self._notify("login" if payload is not None else "logout")
        return payload

    def logout(self) -> None:
        with self._lock:
            self._disarm()
            self._drop_token()
        self._notify("logout")

    def teardown(self) -> None:
        with self._lock:
            self._disarm()

    def _arm(self, token: str, exp: float) -> None:
        self._disarm()
        self._generation += 1
        generation = self._generation
        delay = max(0.0, exp - self.clock())
        self._timer = self.timer_factory(delay, lambda: self._expire(generation, token, exp))
        self._armed_token = token
        self._timer.start()

    def _disarm(self) -> None:
        if self._timer is not None:
            self._timer.cancel()
        self._timer = None
        self._armed_token = None
        self._generation += 1

    def _drop_token(self) -> None:
        if self.storage_key in self.storage:
            del self.storage[self.storage_key]

    def _expire(self, generation: int, token: str, exp: float) -> None:
        with self._lock:
            # A newer login, a logout or a teardown superseded this timer
            if generation != self._generation or self.token != token:
                return

            if self.clock() < exp:
                # Woke early: wait out the remainder
                self._arm(token, exp)
                return

            self._timer = None
            self._armed_token = None
            self._drop_token()

        logger.info("%s session expired", self.kind.capitalize())
        self._notify("expired")

    def _notify(self, event: str) -> None:
        for listener in list(self._listeners):
            listener(event)
