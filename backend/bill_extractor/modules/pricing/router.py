from fastapi import APIRouter

from bill_extractor.modules.pricing.schemas import PriceTableResponse
from bill_extractor.modules.pricing.service import get_price_table

router = APIRouter(tags=["Pricing"], prefix="/api/pricing")


@router.get("", response_model=PriceTableResponse)
async def price_table_endpoint():
    return get_price_table()
