from quizdesk.services.scoring_service import ScoringEngine
from quizdesk.services.result_ledger import ResultLedger

_result_ledger = ResultLedger()
_scoring_engine = ScoringEngine(ledger=_result_ledger)


def get_result_ledger() -> ResultLedger:
    return _result_ledger


def get_scoring_engine() -> ScoringEngine:
    """Scoring engine dependency; overridable in tests through app.dependency_overrides."""
    return _scoring_engine
