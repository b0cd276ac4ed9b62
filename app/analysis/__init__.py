# app/analysis/__init__.py
from app.analysis.types import AnalysisRequest, RawModelResponse, ResultEnvelope, EnvelopeStatus
from app.analysis.gateway import ResultNormalizingGateway
from app.analysis.result_store import ResultStore

__all__ = [
    'AnalysisRequest', 'RawModelResponse', 'ResultEnvelope', 'EnvelopeStatus',
    'ResultNormalizingGateway', 'ResultStore',
]
