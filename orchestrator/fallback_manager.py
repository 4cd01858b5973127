from dataclasses import dataclass

from orchestrator.dispatch_types import AttemptOutcome, DispatchDecision, NextAction


@dataclass(frozen=True)
class BackoffPolicy:
    base: float = 2.0
    unit_s: float = 1.0

    def delay_for(self, failed_attempts: int) -> float:
        return (self.base**failed_attempts) * self.unit_s


class FallbackManager:
    """
    Transition function for the dispatch loop over (provider, attempt).

    Failed fetches retry the same provider until the retry budget is spent.
    A provider that answers without usable content is abandoned at once.
    """

    def __init__(self, backoff: BackoffPolicy | None = None):
        self.backoff = backoff or BackoffPolicy()

    def decide(
        self,
        *,
        outcome: AttemptOutcome,
        failed_attempts: int,
        retry_budget: int,
        remaining_providers: int,
    ) -> DispatchDecision:
        if outcome == AttemptOutcome.SUCCESS:
            return DispatchDecision(action=NextAction.SUCCEED, reason="ok")

        if outcome == AttemptOutcome.FETCH_FAILED and failed_attempts <= retry_budget:
            return DispatchDecision(
                action=NextAction.RETRY_SAME_PROVIDER,
                reason="fetch_failed",
                delay_s=self.backoff.delay_for(failed_attempts),
            )

        reason = "no_usable_content" if outcome == AttemptOutcome.NO_USABLE_CONTENT else "retries_exhausted"
        if remaining_providers > 0:
            return DispatchDecision(action=NextAction.ADVANCE_PROVIDER, reason=reason)
        return DispatchDecision(action=NextAction.EXHAUST, reason=reason)
