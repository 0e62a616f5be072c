"""
Maps execution outcomes onto result envelopes.
"""

from __future__ import annotations

from typing import Iterable, List

from toolbridge.abstractions.dto.tools import ExecutionOutcome, ResultEnvelope


class ResultFormatter:
    """Pure ExecutionOutcome -> ResultEnvelope mapping."""

    def format(self, outcome: ExecutionOutcome) -> ResultEnvelope:
        if outcome.success:
            return ResultEnvelope(call_id=outcome.call_id, is_error=False, content=outcome.output)
        return ResultEnvelope(call_id=outcome.call_id, is_error=True, content=self.describe_error(outcome))

    def format_all(self, outcomes: Iterable[ExecutionOutcome]) -> List[ResultEnvelope]:
        return [self.format(o) for o in outcomes]

    @staticmethod
    def describe_error(outcome: ExecutionOutcome) -> str:
        kind = outcome.error_kind.value if outcome.error_kind else "Error"
        message = f"Error [{kind}]: {outcome.error_detail or 'tool call failed'}"
        if outcome.output:
            message += f"\n{outcome.output}"
        return message


__all__ = ["ResultFormatter"]
