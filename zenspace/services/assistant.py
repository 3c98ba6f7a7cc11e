"""Language-model assistant for slot suggestions and load summaries.

Both public operations always return text: any failure of the underlying
service is logged and replaced with a fixed fallback message.
"""

from __future__ import annotations

import json
import logging

from openai import AsyncOpenAI, OpenAIError

from zenspace.domain.errors import AssistantError
from zenspace.domain.models import Booking, Space

logger = logging.getLogger(__name__)

SUGGESTION_UNAVAILABLE = "Service IA indisponible. Vérifiez la clé API."
SUGGESTION_EMPTY = "Désolé, je n'ai pas pu générer de suggestion."
SUMMARY_UNAVAILABLE = "Analyse indisponible."
SUMMARY_EMPTY = "Pas d'analyse disponible."

_SUMMARY_KEYWORDS = ("analyse", "analyze", "résumé", "resume", "summary")

_SUGGESTION_PROMPT = """\
Tu es une IA experte en réception de centre de bien-être.
Espaces actuels : {spaces}
Réservations du jour : {bookings}

Demande utilisateur : "{request}"

Basé sur la demande, suggère un créneau spécifique (Espace, Heure de début, Durée).
Vérifie les conflits. S'il y a un conflit, suggère l'horaire disponible le plus proche.
Réponds UNIQUEMENT en français, de manière concise et amicale.
"""

_SUMMARY_PROMPT = """\
Analyse le planning du jour basé sur ces services : {services}.
Donne un résumé de 2 phrases sur la charge opérationnelle \
(ex: "Forte demande en massage", "Matinée calme").
Réponds en français, sur un ton professionnel.
"""


def wants_summary(prompt: str) -> bool:
    """True when a free-text request asks for an analysis of the day."""
    lowered = prompt.lower()
    return any(keyword in lowered for keyword in _SUMMARY_KEYWORDS)


class SchedulingAssistant:
    """Thin wrapper over OpenAI chat completions.

    *client* may be None (no API key configured); every call then returns
    the fallback text.
    """

    def __init__(
        self,
        client: AsyncOpenAI | None,
        model: str = "gpt-4o-mini",
        timeout: float = 20.0,
    ) -> None:
        self.client = client
        self.model = model
        self.timeout = timeout

    async def _complete(self, prompt: str) -> str:
        if self.client is None:
            raise AssistantError("No language-model client configured")
        try:
            response = await self.client.chat.completions.create(
                model=self.model,
                messages=[{"role": "user", "content": prompt}],
                temperature=0.4,
                timeout=self.timeout,
            )
            if not response.choices:
                return ""
            return (response.choices[0].message.content or "").strip()
        except OpenAIError as exc:
            raise AssistantError(str(exc)) from exc
        except Exception as exc:
            raise AssistantError(f"{type(exc).__name__}: {exc}") from exc

    async def suggest_slot(
        self, request: str, spaces: list[Space], bookings: list[Booking]
    ) -> str:
        """Suggest a conflict-free slot for a free-text request."""
        prompt = _SUGGESTION_PROMPT.format(
            spaces=json.dumps(
                [{"id": s.id, "name": s.name} for s in spaces], ensure_ascii=False
            ),
            bookings=json.dumps(
                [
                    {
                        "space": b.space_id,
                        "start": b.start_time,
                        "duration": b.duration_minutes,
                    }
                    for b in bookings
                ]
            ),
            request=request,
        )
        try:
            text = await self._complete(prompt)
        except AssistantError as exc:
            logger.error("Slot suggestion failed: %s", exc)
            return SUGGESTION_UNAVAILABLE
        return text or SUGGESTION_EMPTY

    async def summarize_load(self, bookings: list[Booking]) -> str:
        """Two-sentence summary of the day's operational load."""
        services = ", ".join(
            f"{b.service_name} ({b.duration_minutes}m)" for b in bookings
        )
        try:
            text = await self._complete(_SUMMARY_PROMPT.format(services=services))
        except AssistantError as exc:
            logger.error("Load summary failed: %s", exc)
            return SUMMARY_UNAVAILABLE
        return text or SUMMARY_EMPTY
