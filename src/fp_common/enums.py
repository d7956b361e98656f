"""Global enums — values must match what the FlowPonder contract and clients exchange."""

from enum import Enum


class PonderCategory(str, Enum):
    SPORTS = "Sports"
    POLITICS = "Politics"
    CRYPTO = "Crypto"
    ENTERTAINMENT = "Entertainment"
    TECHNOLOGY = "Technology"
    SCIENCE = "Science"
    ECONOMICS = "Economics"
    SOCIAL = "Social"
    GAMING = "Gaming"
    OTHER = "Other"


class LeaderboardMetric(str, Enum):
    ACCURACY = "accuracy"
    TOTAL_WINNINGS = "totalWinnings"
    TOTAL_VOTES = "totalVotes"


class PonderFilter(str, Enum):
    ALL = "all"
    FEATURED = "featured"
    ENDING_SOON = "ending-soon"


class SessionState(str, Enum):
    SIGNED_OUT = "SIGNED_OUT"
    AUTHENTICATING = "AUTHENTICATING"
    SIGNED_IN = "SIGNED_IN"
    SIGNING_OUT = "SIGNING_OUT"


class AuthFailure(str, Enum):
    USER_REJECTED = "USER_REJECTED"
    TIMEOUT = "TIMEOUT"
    NOT_SIGNED_IN = "NOT_SIGNED_IN"


class LedgerErrorKind(str, Enum):
    SUBMISSION_REJECTED = "SUBMISSION_REJECTED"
    NETWORK_UNAVAILABLE = "NETWORK_UNAVAILABLE"
    AUTHORIZATION_MISSING = "AUTHORIZATION_MISSING"
    TIMEOUT = "TIMEOUT"
    EXECUTION_REVERTED = "EXECUTION_REVERTED"
    QUERY_FAILED = "QUERY_FAILED"


class TransactionStatus(str, Enum):
    """Access-node transaction lifecycle (REST API spelling)."""
    UNKNOWN = "Unknown"
    PENDING = "Pending"
    FINALIZED = "Finalized"
    EXECUTED = "Executed"
    SEALED = "Sealed"
    EXPIRED = "Expired"


class OperationKind(str, Enum):
    CREATE_PONDER = "CREATE_PONDER"
    PLACE_VOTE = "PLACE_VOTE"
    WITHDRAW_WINNINGS = "WITHDRAW_WINNINGS"


class OperationPhase(str, Enum):
    """Two-phase view of a mutation: proposed locally, then submitted to the ledger."""
    PROPOSED = "PROPOSED"
    SUBMITTED = "SUBMITTED"
