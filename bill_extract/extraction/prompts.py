"""Prompt construction for amount extraction."""

from .models import AmountKind

_TEMPLATE = """You are an expert financial data extraction AI specializing in medical documents.
Your task is to extract financial amounts from the following text, which may contain OCR errors.

Instructions:
1. Correct any obvious OCR errors in numbers (e.g., 'l' should be '1', 'O' should be '0').
2. Identify the currency (look for symbols like $, ₹, INR, USD, EUR, etc.). Default to "{currency}" if unclear.
3. Extract amounts for: {kinds}. Look for keywords like Total, Subtotal, Amount Due, Paid, Balance, etc.
4. For each amount found, include the exact source text from the document.
5. If you cannot find a value for a specific type, do not include it in the amounts array.
6. Your response MUST be a single, valid JSON object in this exact format:

{{
  "currency": "[detected currency code]",
  "amounts": [
    {{"type":"total_bill","value":[number],"source":"text: '[exact text from document]'"}},
    {{"type":"paid","value":[number],"source":"text: '[exact text from document]'"}},
    {{"type":"due","value":[number],"source":"text: '[exact text from document]'"}}
  ],
  "status":"ok"
}}

Do not include markdown formatting, explanations, or any text outside the JSON.

Text to analyze:
---
{text}
---

JSON Output:"""


def build_extraction_prompt(ocr_text: str, default_currency: str = "INR") -> str:
    """Embed recognized bill text in the extraction instructions.

    Args:
        ocr_text: Text recognized from the bill image.
        default_currency: Currency code the model should assume when unsure.

    Returns:
        Prompt text for the model.
    """
    kinds = ", ".join(f'"{kind.value}"' for kind in AmountKind)
    return _TEMPLATE.format(currency=default_currency, kinds=kinds, text=ocr_text)
