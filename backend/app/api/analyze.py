from fastapi import APIRouter, Depends

from backend.app.core.http_client import get_lichess_client
from backend.app.schemas.analysis_schema import AnalysisResponse, AnalyzeRequest, ErrorResponse
from backend.app.services.analysis_service import AnalysisService
from backend.app.services.lichess_client import LichessClient

router = APIRouter()

ERROR_RESPONSES = {
    status: {"model": ErrorResponse} for status in (400, 404, 500, 502, 504)
}

@router.post("/analyze", response_model=AnalysisResponse, responses=ERROR_RESPONSES)
async def analyze_tournament(payload: AnalyzeRequest, lichess: LichessClient = Depends(get_lichess_client)):
    """
    Aggregates inaccuracies, mistakes, blunders and accuracy for every player of
    a Lichess arena or swiss tournament, then ranks the eligible players.
    """
    service = AnalysisService(lichess)
    return await service.analyze(payload.tournament_id, payload.type)
