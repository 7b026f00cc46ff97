"""
Diagnostic opt-in / opt-out choice.

The learner decides once whether to take the diagnostic path. The choice is
kept in offline storage so the buttons stay settled across sessions, and it
determines where navigation goes next.
"""

from __future__ import annotations

from loguru import logger

from src.adaptive.models import DIAGNOSTIC_OPT_OUT_KEY, AdaptiveContentConfig
from src.storage.base import OfflineStorage


class DiagnosticChoice:
    """The `diagnosticOptOut` flag and the navigation it implies."""

    def __init__(self, config: AdaptiveContentConfig, storage: OfflineStorage):
        self._config = config
        self._storage = storage

    @property
    def diagnostic_opt_out(self) -> bool | None:
        """True = opted out, False = opted in, None = not chosen yet."""
        value = self._storage.get(DIAGNOSTIC_OPT_OUT_KEY)
        return value if isinstance(value, bool) else None

    @property
    def has_user_chosen(self) -> bool:
        return self.diagnostic_opt_out is not None

    def opt_in(self) -> bool:
        return self._record(opt_out=False)

    def opt_out(self) -> bool:
        return self._record(opt_out=True)

    def navigation_target(self) -> str | None:
        """Page to send the learner to for the recorded choice."""
        if self.diagnostic_opt_out is None:
            return None
        if self.diagnostic_opt_out:
            return self._config.opt_out_page_id
        return self._config.opt_in_page_id

    def _record(self, opt_out: bool) -> bool:
        if self.has_user_chosen:
            logger.debug(f"Diagnostic choice already made (optOut={self.diagnostic_opt_out})")
            return False

        self._storage.set(DIAGNOSTIC_OPT_OUT_KEY, opt_out)
        self._storage.save()
        logger.info(f"Learner opted {'out of' if opt_out else 'in to'} the diagnostic")
        return True
