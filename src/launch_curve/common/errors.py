class CurveConfigError(ValueError):
    """Invalid, degenerate or non-monotonic curve configuration."""


class TradeError(ValueError):
    """Base class for errors raised while quoting or committing a trade."""


class InvalidAmountError(TradeError):
    """A trade amount or budget that is not strictly positive."""


class InfeasibleTradeError(TradeError):
    """A trade that cannot be filled as requested and clamping is disabled."""
