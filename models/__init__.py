from .db import db
from .bird import Bird, BirdNotFound, BirdValidationError
from .bird_store import BirdStore
from .journal import TimeWindowJournal
from .operation_log import OperationLog
from .rate_limit import OperationRateLimiter, RateLimitDecision
