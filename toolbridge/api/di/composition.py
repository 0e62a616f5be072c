"""
Composition module (edge wiring).

Builds one ToolBridge per server lifetime and passes it by reference; nothing
here is cached at module level.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any, Iterable, List, Optional

from toolbridge.abstractions.dto.tools import ExecutionOutcome, ParsedCall, ResultEnvelope
from toolbridge.infrastructure.tools.catalog import ToolCatalog
from toolbridge.infrastructure.tools.config import Config
from toolbridge.infrastructure.tools.extraction import ExtractionEngine
from toolbridge.infrastructure.tools.formatter import ResultFormatter
from toolbridge.infrastructure.tools.prompt import PromptComposer
from toolbridge.infrastructure.tools.sandbox import SandboxExecutor
from toolbridge.interfaces.services.tools import ICallExtractor, IToolCatalog, IToolExecutor


@dataclass
class TurnResult:
    calls: List[ParsedCall] = field(default_factory=list)
    outcomes: List[ExecutionOutcome] = field(default_factory=list)
    envelopes: List[ResultEnvelope] = field(default_factory=list)
    residue: str = ""

    @property
    def has_calls(self) -> bool:
        return bool(self.calls)

    def feedback_text(self) -> str:
        """All result envelopes as text blocks, in call order."""
        return "\n\n".join(e.to_text() for e in self.envelopes)


class ToolBridge:
    """
    Context object tying together catalog, prompt, extraction and execution.
    """

    def __init__(
        self,
        catalog: IToolCatalog,
        composer: PromptComposer,
        engine: ICallExtractor,
        executor: IToolExecutor,
        formatter: Optional[ResultFormatter] = None,
    ):
        self.catalog = catalog
        self.composer = composer
        self.engine = engine
        self.executor = executor
        self.formatter = formatter or ResultFormatter()

    def prompt_fragment(self) -> str:
        return self.composer.compose(self.catalog.list_tools())

    def system_prompt(self, base: str = "") -> str:
        return self.composer.inject(base, self.catalog.list_tools())

    def run_turn(self, raw_output: str) -> TurnResult:
        """Extract calls from one model response, execute them in order, wrap the outcomes."""
        extraction = self.engine.extract(raw_output)
        outcomes = self.executor.execute_all(extraction.calls)
        return TurnResult(
            calls=extraction.calls,
            outcomes=outcomes,
            envelopes=self.formatter.format_all(outcomes),
            residue=extraction.residue,
        )


def build_executor(config: Config) -> SandboxExecutor:
    """
    Construct and return a SandboxExecutor for the configured policy.
    """
    return SandboxExecutor(config.to_policy())


def build_tool_bridge(config: Optional[Config] = None, tools: Optional[Iterable[Any]] = None) -> ToolBridge:
    """
    Construct and return a ToolBridge.

    Args:
        config: Settings; read from the environment when omitted
        tools: Raw tool declarations in any supported shape; the sandbox's
            built-in operations are declared when omitted
    """
    config = config or Config.from_env()
    executor = build_executor(config)
    declarations = executor.tool_definitions() if tools is None else tools
    return ToolBridge(
        catalog=ToolCatalog.from_declarations(declarations),
        composer=PromptComposer(config.prompt_convention),
        engine=ExtractionEngine(config.protocols),
        executor=executor,
    )


__all__ = ["ToolBridge", "TurnResult", "build_executor", "build_tool_bridge"]
