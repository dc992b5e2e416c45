import os


def _canon_prefix(val):
    """
    Normalize API prefix to always be exactly like '/api':
      - defaults to '/api' when unset/empty
      - ensures a single leading slash
      - removes any trailing slash (except for root)
    """
    val = (val or "/api").strip()
    if not val.startswith("/"):
        val = "/" + val
    if len(val) > 1 and val.endswith("/"):
        val = val[:-1]
    return val


def _env_flag(name: str, default: bool = False) -> bool:
    raw = os.getenv(name)
    if raw is None or not raw.strip():
        return default
    return raw.strip().lower() in {"1", "true", "yes", "on"}


API_PREFIX = _canon_prefix(os.getenv("API_PREFIX"))

DEFAULT_ME_NAME = "Shakthi"
DEFAULT_FRIEND_NAME = "Shynu"


def roster_names() -> tuple[str, str]:
    """Return the configured ``(me, friend)`` player names.

    Read at call time so tests can swap names through the environment.
    """

    me = (os.getenv("ME_PLAYER_NAME") or DEFAULT_ME_NAME).strip()
    friend = (os.getenv("FRIEND_PLAYER_NAME") or DEFAULT_FRIEND_NAME).strip()
    if not me or not friend:
        raise RuntimeError("ME_PLAYER_NAME and FRIEND_PLAYER_NAME must not be blank")
    if me.lower() == friend.lower():
        raise RuntimeError("ME_PLAYER_NAME and FRIEND_PLAYER_NAME must differ")
    if "roster" in {me.lower(), friend.lower()}:
        raise RuntimeError("'roster' is reserved and cannot be a player name")
    return me, friend


def rate_limits_disabled() -> bool:
    return _env_flag("DISABLE_RATE_LIMITS")


def reset_enabled() -> bool:
    return _env_flag("ENABLE_RESET")


MATCH_SUBMIT_RATE_LIMIT = os.getenv("MATCH_SUBMIT_RATE_LIMIT") or "30/minute"
SEED_ON_STARTUP = _env_flag("SEED_ON_STARTUP", default=True)
LOG_LEVEL = (os.getenv("LOG_LEVEL") or "INFO").upper()
