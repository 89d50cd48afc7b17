from fastapi import APIRouter, Depends, HTTPException, Header, Request
from fastapi.responses import PlainTextResponse
from doubleminer.api.schemas import (
    AnomaliesOut, CandidateOut, IngestOut, OutcomeIn, OutcomeOut, PatternOut,
    SettlementOut, SignalOut, SourceOut, StatsOut,
)
from doubleminer.config import settings
from doubleminer.core.types import to_dict, utcnow
from doubleminer.core.validation import DuplicateOutcomeError, InvalidOutcomeError
from doubleminer.services import Engine

router = APIRouter()


def get_engine(request: Request) -> Engine:
    return request.app.state.engine


def _auth(api_key_header: str | None = Header(default=None, alias="X-API-Key")):
    if settings.api_key and api_key_header != settings.api_key:
        raise HTTPException(status_code=401, detail="Invalid API key")


def _ingest_result(engine: Engine, result) -> dict:
    if result is None:
        return {
            'stored': None,
            'settlement': None,
            'signal': to_dict(engine.signal) if engine.signal else None,
            'stats': to_dict(engine.stats),
        }
    outcome, record, signal = result
    return {
        'stored': to_dict(outcome),
        'settlement': to_dict(record) if record else None,
        'signal': to_dict(signal),
        'stats': to_dict(engine.stats),
    }


@router.post('/outcomes', response_model=IngestOut)
async def ingest(data: OutcomeIn, engine: Engine = Depends(get_engine), ok=Depends(_auth)):
    payload = data.model_dump()
    if payload['timestamp'] is None:
        payload['timestamp'] = utcnow()
    try:
        result = engine.add_outcome(payload)
    except DuplicateOutcomeError as e:
        raise HTTPException(409, detail=str(e))
    except InvalidOutcomeError as e:
        raise HTTPException(400, detail=str(e))
    return _ingest_result(engine, result)

@router.post('/simulate', response_model=IngestOut)
async def simulate(engine: Engine = Depends(get_engine), ok=Depends(_auth)):
    if engine.source is None:
        raise HTTPException(503, detail="no data source configured")
    # stored is null when the source has no new outcome
    return _ingest_result(engine, engine.simulate())

@router.post('/analyze', response_model=SignalOut)
async def analyze(engine: Engine = Depends(get_engine), ok=Depends(_auth)):
    return to_dict(engine.analyze())

@router.get('/signal', response_model=SignalOut | None)
async def signal(engine: Engine = Depends(get_engine)):
    return to_dict(engine.signal) if engine.signal else None

@router.get('/outcomes', response_model=list[OutcomeOut])
async def outcomes(limit: int = 50, engine: Engine = Depends(get_engine)):
    return [to_dict(o) for o in engine.outcomes[-limit:]]

@router.get('/patterns', response_model=list[PatternOut])
async def patterns(engine: Engine = Depends(get_engine)):
    return [to_dict(p) for p in engine.patterns]

@router.get('/predictions', response_model=list[CandidateOut])
async def predictions(engine: Engine = Depends(get_engine)):
    return [to_dict(c) for c in engine.candidates]

@router.get('/stats', response_model=StatsOut)
async def stats(engine: Engine = Depends(get_engine)):
    return to_dict(engine.stats)

@router.get('/settlements', response_model=list[SettlementOut])
async def settlements(limit: int = 50, engine: Engine = Depends(get_engine)):
    return [to_dict(r) for r in engine.settlements(limit=limit)]

@router.get('/anomalies', response_model=AnomaliesOut)
async def anomalies(engine: Engine = Depends(get_engine)):
    report = engine.anomalies()
    return {'has_anomalies': report.has_anomalies, 'anomalies': report.anomalies}

@router.get('/summary')
async def summary(engine: Engine = Depends(get_engine)):
    return engine.summary()

@router.post('/sync')
async def sync(limit: int = 100, engine: Engine = Depends(get_engine), ok=Depends(_auth)):
    n = engine.sync(limit)
    return {'success': n > 0, 'new_results': n}

@router.get('/source', response_model=SourceOut)
async def source(engine: Engine = Depends(get_engine)):
    return {'source': settings.source, 'online': engine.source_online()}

@router.get('/export', response_class=PlainTextResponse)
async def export(engine: Engine = Depends(get_engine), ok=Depends(_auth)):
    if engine.store is None:
        raise HTTPException(503, detail="no store configured")
    return engine.store.export_data()

@router.post('/import')
async def import_(request: Request, engine: Engine = Depends(get_engine), ok=Depends(_auth)):
    if engine.store is None:
        raise HTTPException(503, detail="no store configured")
    raw = (await request.body()).decode()
    if not engine.store.import_data(raw):
        raise HTTPException(400, detail="invalid backup")
    engine.load()
    return {'success': True, 'outcomes': len(engine.outcomes)}

@router.delete('/data')
async def clear(engine: Engine = Depends(get_engine), ok=Depends(_auth)):
    engine.reset()
    return {'success': True}
