class NsbenchError(Exception):
    """Base class for every fatal nsbench error."""


class ConfigError(NsbenchError):
    pass


class InitializationError(NsbenchError):
    """A worker could not build its resolver or never reported ready."""


class ChannelInvariantError(NsbenchError):
    """A ready, sample or final-result message went missing, was duplicated,
    or was delivered after the receiving end closed."""


class RateUndefinedError(NsbenchError, ZeroDivisionError):
    """Success rate or throughput asked for with zero attempts or zero duration."""
