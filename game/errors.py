"""
Exception hierarchy for the arbiter client
"""


class ArbiterClientError(Exception):
    """Base class for arbiter client failures"""


class ConfigError(ArbiterClientError):
    """Persisted settings could not be read or validated"""


class ChannelUnavailable(ArbiterClientError):
    """No channel selected, or the channel could not be opened"""


class ExchangeError(ArbiterClientError):
    """A request/reply exchange failed; the session cannot continue on this channel"""


class ProtocolTimeout(ExchangeError):
    pass


class TransportError(ExchangeError):
    pass
