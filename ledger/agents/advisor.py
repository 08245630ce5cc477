"""
Monthly Narrative Advisor

DESIGN DECISION: The LLM only writes prose about numbers the engine
already computed. Its answer is shown to the user as-is and is never
parsed back into the ledger.

BOUNDARIES:
- CAN: Comment on realized vs. projected balance, pending items, next steps
- CANNOT: Change, create or confirm transactions
- NEVER raises: any failure degrades to a fixed fallback message
"""

from decimal import Decimal
from typing import Optional, Sequence

import google.generativeai as genai

from ledger.activity import ActivityLogger
from ledger.config import GeminiSettings, get_settings
from ledger.engine.balance import sum_amounts
from ledger.models.ledger import (
    MonthKey,
    Transaction,
    TransactionStatus,
    TransactionType,
)


EMPTY_RESPONSE_MESSAGE = "Analysis finished, but no text was generated."
FALLBACK_MESSAGE = (
    "Could not reach the financial advisor right now. "
    "Check the Gemini API key in your settings and try again."
)


class NarrativeAdvisor:
    """
    Turns one month's transactions into short written advice.

    The month's figures are computed locally and embedded in the prompt;
    the model is asked for a diagnosis, an alert and an action plan.
    """

    def __init__(
        self,
        model=None,
        settings: Optional[GeminiSettings] = None,
        currency_symbol: Optional[str] = None,
        activity_logger: Optional[ActivityLogger] = None,
    ):
        """
        Initialize the advisor.

        Args:
            model: Object exposing ``generate_content_async``.
                   If None, a Gemini model is configured from settings.
        """
        self._settings = settings
        self._model = model
        self._currency = currency_symbol or get_settings().app.currency_symbol
        self._activity_logger = activity_logger

    def _get_model(self):
        """Configure Google Generative AI on first use."""
        if self._model is None:
            settings = self._settings or get_settings().gemini
            genai.configure(api_key=settings.api_key)
            self._model = genai.GenerativeModel(
                model_name=settings.model_name,
                generation_config={
                    "temperature": settings.temperature,
                    "max_output_tokens": settings.max_tokens,
                }
            )
        return self._model

    def _money(self, value: Decimal) -> str:
        return f"{self._currency} {value:,.2f}"

    def build_prompt(
        self,
        month: MonthKey,
        transactions: Sequence[Transaction],
    ) -> str:
        """Render the prompt for one month. Deterministic, no LLM involved."""
        confirmed_in = sum_amounts(transactions, TransactionType.INCOME, TransactionStatus.CONFIRMED)
        confirmed_out = sum_amounts(transactions, TransactionType.EXPENSE, TransactionStatus.CONFIRMED)
        pending_in = sum_amounts(transactions, TransactionType.INCOME, TransactionStatus.PENDING)
        pending_out = sum_amounts(transactions, TransactionType.EXPENSE, TransactionStatus.PENDING)

        summary = ", ".join(
            f"{t.description}: {self._money(t.amount)} "
            f"({t.type.value}, {'settled' if t.is_confirmed else 'pending'})"
            for t in transactions
        ) or "no transactions"

        return f"""As a strategic personal-finance mentor, analyse the month of {month.value}.

Current figures:
- Received (money in hand): {self._money(confirmed_in)}
- Paid (settled bills): {self._money(confirmed_out)}
- Realized balance today: {self._money(confirmed_in - confirmed_out)}
- Expected income (pending): {self._money(pending_in)}
- Bills to pay (pending): {self._money(pending_out)}
- End-of-month projection: {self._money((confirmed_in + pending_in) - (confirmed_out + pending_out))}

Transactions: {summary}

Give a short, direct analysis in three parts:
1. DIAGNOSIS: How healthy is the real balance compared to the projection?
2. ALERT: Which pending bills are the most dangerous, or which incomes are opportunities?
3. ACTION PLAN: What should the user do NOW to improve the projected balance?

Use an executive, encouraging and professional tone."""

    async def advise(
        self,
        month: MonthKey,
        transactions: Sequence[Transaction],
    ) -> str:
        """
        Ask the model for advice on one month.

        Returns the generated text, EMPTY_RESPONSE_MESSAGE when the model
        answers without text, or FALLBACK_MESSAGE on any failure.
        """
        prompt = self.build_prompt(month, transactions)

        try:
            response = await self._get_model().generate_content_async(prompt)
            text = (response.text or "").strip()
        except Exception as e:
            if self._activity_logger:
                self._activity_logger.log_narrative_failed(month, str(e))
            return FALLBACK_MESSAGE

        return text or EMPTY_RESPONSE_MESSAGE
