# spotter/errors.py


class SpotterError(Exception):
    pass


class ConfigError(SpotterError, ValueError):
    """
    Raised when configuration or a serialized table is malformed.
    These indicate a broken build artifact, so callers should not try to
    recover from them.
    """
