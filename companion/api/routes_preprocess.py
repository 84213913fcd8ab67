import time
import logging
from fastapi import APIRouter, Depends
from companion.models import api_models
from companion.preprocess.pipeline import Preprocessor, get_preprocessor

logger = logging.getLogger(__name__)
router = APIRouter(prefix="/preprocess")


# Pipeline: conversation handler sends the raw utterance -> normalize -> typo-correct
# -> slang / implicit meaning / context / classification / clarification -> result
# consumed by intent and response selection.


@router.post("", response_model=api_models.ProcessingResult)
async def preprocess(request: api_models.PreprocessRequest, preprocessor: Preprocessor = Depends(get_preprocessor)):
    start_time = time.time()
    result = preprocessor.process(request.text)
    latency = (time.time() - start_time) * 1000
    logger.info(
        f"[Preprocess] '{result.processed_input[:80]}' in {latency:.1f}ms | "
        f"context={result.inferred_context} clarify={result.needs_clarification}"
    )
    return result


@router.post("/follow-up", response_model=api_models.FollowUpResponse)
async def follow_up(request: api_models.PreprocessRequest, preprocessor: Preprocessor = Depends(get_preprocessor)):
    return api_models.FollowUpResponse(follow_up=preprocessor.generate_follow_up(request.text))


@router.get("/clarifications/{keyword}", response_model=api_models.ClarificationOptionsResponse)
async def clarification_options(keyword: str, preprocessor: Preprocessor = Depends(get_preprocessor)):
    options = preprocessor.clarification_options(keyword)
    if not options:
        logger.info(f"[Preprocess] No clarification options for '{keyword}'")
    return api_models.ClarificationOptionsResponse(keyword=keyword.strip().lower(), options=options)
