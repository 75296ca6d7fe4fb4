"""
HISS Backend — Vocabulary Route
================================

What:  GET /values returns every controlled vocabulary.
Who:   The annotation front-end, once at start-up, to fill its drop-downs.
"""

from typing import Dict, List

from fastapi import APIRouter, Response

from hiss import vocabulary

router = APIRouter(tags=["Vocabularies"])


@router.get(
    "/values",
    response_model=Dict[str, List[str]],
    summary="List the controlled vocabularies",
    description=(
        "Returns each vocabulary name with its legal values in display order. "
        "Feature submissions are validated against exactly these lists."
    ),
)
async def list_values(response: Response) -> Dict[str, List[str]]:
    # Vocabularies only change with a deployment
    response.headers["Cache-Control"] = "public, max-age=3600"
    return vocabulary.all_vocabularies()
