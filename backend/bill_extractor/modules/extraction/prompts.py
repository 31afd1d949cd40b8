BILL_FIELDS: tuple[str, ...] = (
    "Address",
    "Arrears",
    "BaCode",
    "BillDate",
    "BillDueDate",
    "BilledUnit",
    "BillFetchTimeStamp",
    "BillMonth",
    "BillNo",
    "CanSerNo",
    "CGST",
    "CircleCode",
    "CmrDt",
    "CmrKwh",
    "ConCat",
    "ConnLd",
    "ConnType",
    "ConsumerName",
    "ConsUnits",
    "CurAmtPay",
    "DiscCode",
    "EleDuty",
    "EngyChg",
    "EntityCode",
    "EntityType",
    "Filename",
    "FinalClosingReading",
    "FinalConsUnits",
    "FinalOpeningReading",
    "FulCstAdj",
    "FxdChg",
    "GrosAmt",
    "LastAmountpaid",
    "LastAmountPaidDate",
    "LtPaySurChg",
    "MeterStatus",
    "MetRent",
    "MetrNo",
    "MulFac",
    "OmrDt",
    "OmrKwh",
)

SYSTEM_PROMPT = (
    "You are a helpful assistant that extracts information from electricity bills. "
    "You must return your response as a valid JSON object without any markdown "
    "formatting or code blocks."
)

USER_PROMPT = (
    "Extract the following fields from this electricity bill text and return ONLY "
    "a JSON object (no markdown, no ``` blocks):\n\n"
    "Required fields: {fields}.\n\n"
    "Bill text:\n{text}"
)


def build_messages(text: str) -> list[dict]:
    return [
        {"role": "system", "content": SYSTEM_PROMPT},
        {
            "role": "user",
            "content": USER_PROMPT.format(fields=", ".join(BILL_FIELDS), text=text),
        },
    ]
