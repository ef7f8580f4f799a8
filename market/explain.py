"""
Natural-language explanation of a computed market.

The text comes from an external generative-text service (Gemini
``generateContent``).  The request is built from a ``MarketResult``; the
reply is the first candidate's text.  Failures never raise: they come back
as one of the fixed fallback strings so the caller can display them as-is.
"""

from typing import Optional

import requests

from market.config import get_settings
from market.logger import get_logger

NO_EXPLANATION = "Could not generate an explanation. Please try again."
CONNECTION_ERROR = (
    "Error connecting to the explanation service. "
    "Make sure you have an internet connection."
)

logger = get_logger(__name__)


def can_explain(result) -> bool:
    """There is something to explain: an equilibrium or an error."""
    return bool(result.original or result.shifted or result.error)


def build_prompt(result) -> str:
    """Describe the equations, shifts and equilibria for the text service."""
    lines = [
        "We are analysing a market with the following supply and demand equations:",
        f"- Demand equation (Qd): {result.demand_equation}",
        f"- Supply equation (Qs): {result.supply_equation}",
    ]

    if result.original is not None:
        lines += [
            "",
            "The initial equilibrium point is:",
            f"- Equilibrium price (initial P_E): {result.original.price:.2f}",
            f"- Equilibrium quantity (initial Q_E): {result.original.quantity:.2f}",
        ]

    if result.shifts_active:
        lines += [
            "",
            "The following shifts were applied:",
            f"- Demand shift: {result.demand_shift:g}",
            f"- Supply shift: {result.supply_shift:g}",
        ]
        if result.shifted is not None:
            lines += [
                "The new equilibrium point after the shifts is:",
                f"- New equilibrium price (new P_E): {result.shifted.price:.2f}",
                f"- New equilibrium quantity (new Q_E): {result.shifted.quantity:.2f}",
            ]
        else:
            lines.append("No valid new equilibrium point was found after the shifts.")

    if result.error:
        lines += [
            "",
            f"The calculation also reported this error: {result.error}. "
            "Please explain what this error could mean in economic terms "
            "(for example, parallel curves or a negative equilibrium).",
        ]

    lines += [
        "",
        "Please give a detailed explanation of what these results mean in economic terms.",
        "Cover the following points:",
        "1. A short description of what the demand curve represents and how it relates to consumer behaviour.",
        "2. A short description of what the supply curve represents and how it relates to producer behaviour.",
        "3. Why the equilibrium point matters for the market.",
        "4. What happens if the price is above equilibrium (excess supply or surplus) and how the market corrects.",
        "5. What happens if the price is below equilibrium (excess demand or shortage) and how the market corrects.",
        "6. If shifts were applied, how they moved the curves and the equilibrium price and quantity.",
        "",
        "Keep it concise, clear and didactic, suitable for someone learning basic economics.",
    ]
    return "\n".join(lines)


def build_payload(prompt: str) -> dict:
    return {"contents": [{"role": "user", "parts": [{"text": prompt}]}]}


def _extract_text(body) -> Optional[str]:
    """First candidate's first text part, or None for any other shape."""
    try:
        candidates = body.get("candidates") or []
        parts = candidates[0]["content"]["parts"]
        text = parts[0]["text"]
    except (AttributeError, IndexError, KeyError, TypeError):
        return None
    return text if isinstance(text, str) else None


def request_explanation(result, settings: Optional[dict] = None,
                        session=None) -> str:
    """Ask the text service to explain *result*.

    Returns the generated text, ``NO_EXPLANATION`` for an unexpected reply,
    or ``CONNECTION_ERROR`` when the request itself fails.
    """
    cfg = settings if settings is not None else get_settings()
    http = session if session is not None else requests
    url = cfg["explain_url"].format(model=cfg["explain_model"])

    try:
        logger.info(f"Requesting explanation from {url}")
        response = http.post(
            url,
            params={"key": cfg["api_key"]},
            json=build_payload(build_prompt(result)),
            headers={"Content-Type": "application/json"},
            timeout=cfg["explain_timeout"],
        )
        response.raise_for_status()
        body = response.json()
    except requests.exceptions.RequestException as req_err:
        logger.error(f"Explanation request failed: {req_err}")
        return CONNECTION_ERROR
    except ValueError as json_err:
        logger.error(f"Explanation response was not JSON: {json_err}")
        return CONNECTION_ERROR

    text = _extract_text(body)
    if text is None:
        logger.error(f"Unexpected API response structure: {body}")
        return NO_EXPLANATION
    return text
