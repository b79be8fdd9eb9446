"""Analysis pipeline coordinating parsing, extraction and synthesis."""

from __future__ import annotations

import logging
from collections import Counter
from dataclasses import dataclass
from typing import List, Optional

from .catalog import build_catalog
from .config import DEFAULT_KEEP_TAIL, AnalysisConfig
from .extractor import find_best_chain, traverse
from .js_parser import JavaScriptParser, JsNode
from .models import (
    AnalysisSummary,
    Catalog,
    Chain,
    HookTarget,
    Path,
    Pattern,
    PatternMode,
)
from .regex_builder import SynthesisOptions, build_hook_patterns, parse_hook, synthesize

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class AnalysisResult:
    """Everything one analysis run produced."""

    root: JsNode
    raw_paths: List[Path]
    catalog: Catalog
    pattern: Pattern
    config: AnalysisConfig

    def summary(self) -> AnalysisSummary:
        counts = Counter(p.kind.value for p in self.catalog)
        return AnalysisSummary(raw=len(self.raw_paths), kept=len(self.catalog), by_kind=dict(counts))


@dataclass(frozen=True)
class HookResult:
    target: HookTarget
    tail: Pattern
    smart: Pattern
    best_chain: Optional[Chain]


class HookAnalyzer:
    """Runs source -> tree -> paths -> catalog -> pattern.

    Holds only the parser; every call returns a fresh result and nothing
    from one run leaks into the next.
    """

    def __init__(self, parser: Optional[JavaScriptParser] = None, tolerant: bool = False):
        self.parser = parser or JavaScriptParser()
        self.tolerant = tolerant

    def parse(self, source: str) -> JsNode:
        return self.parser.parse(source, tolerant=self.tolerant)

    def analyze(
        self,
        source: str,
        config: Optional[AnalysisConfig] = None,
        options: Optional[SynthesisOptions] = None,
    ) -> AnalysisResult:
        config = config or AnalysisConfig()
        root = self.parse(source)
        raw_paths = traverse(root, config)
        catalog = build_catalog(raw_paths, config)
        mode = PatternMode.FLEXIBLE if config.flexible else PatternMode.EXACT
        pattern = synthesize(catalog, mode, options)
        logger.info(
            "Analysis found %d paths, kept %d (%s mode)",
            len(raw_paths), len(catalog), mode.value,
        )
        return AnalysisResult(
            root=root,
            raw_paths=raw_paths,
            catalog=catalog,
            pattern=pattern,
            config=config,
        )

    def analyze_hook(
        self,
        source: str,
        hook: str,
        keep_tail: int = DEFAULT_KEEP_TAIL,
        tie_break: str = "first",
    ) -> HookResult:
        target = parse_hook(hook)
        root = self.parse(source)
        best = find_best_chain(root, target, tie_break=tie_break)
        if best is None:
            logger.info("No chain in the source ends with %s", target)
        tail, smart = build_hook_patterns(target, best, keep_tail=keep_tail)
        return HookResult(target=target, tail=tail, smart=smart, best_chain=best)


def analyze(
    source: str,
    config: Optional[AnalysisConfig] = None,
    options: Optional[SynthesisOptions] = None,
    tolerant: bool = False,
) -> AnalysisResult:
    return HookAnalyzer(tolerant=tolerant).analyze(source, config, options)


def analyze_hook(
    source: str,
    hook: str,
    keep_tail: int = DEFAULT_KEEP_TAIL,
    tie_break: str = "first",
    tolerant: bool = False,
) -> HookResult:
    return HookAnalyzer(tolerant=tolerant).analyze_hook(source, hook, keep_tail, tie_break)
