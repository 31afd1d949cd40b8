from pydantic import BaseModel


class ModelRates(BaseModel):
    input_per_million: float
    cached_input_per_million: float
    output_per_million: float


class PricingInfo(BaseModel):
    model: str
    pricing_model: str | None = None
    pricing_source: str | None = None
    currency: str = "USD"
    available: bool = True
    rates: ModelRates | None = None
    input_cost: str = "N/A"
    output_cost: str = "N/A"
    total_cost: str = "N/A"
    reason: str | None = None


class PriceTableEntry(BaseModel):
    model: str
    rates: ModelRates


class PriceTableResponse(BaseModel):
    status: str
    currency: str
    default_model: str
    models: list[PriceTableEntry]
