"""End-to-end conversion pipeline for single documents."""

from __future__ import annotations

import difflib
from dataclasses import dataclass, field
from pathlib import Path
from typing import Dict, List, Optional, Sequence

from .config import ConfigError, MdxPortConfig, load_config
from .llm.runner import LLMRunner
from .logging import get_logger
from .models import ChangeRecord, ComponentBlock, ScanResult
from .postproc.lint import MdxLinter
from .postproc.splice import splice_conversions
from .resolution.client import GenerativeClient
from .resolution.orchestrator import ResolutionOrchestrator
from .rules.components import DEFAULT_RULES
from .rules.pipeline import Rule, run_rules
from .scanning.constants import PIPELINE_HANDLED_COMPONENTS
from .scanning.scanner import ComponentScanner

SUPPORTED_SUFFIXES = (".md", ".mdx")


@dataclass
class ConversionOutcome:
    """Converted document plus the audit trail of how it was produced."""

    content: str
    changes: List[ChangeRecord] = field(default_factory=list)
    warnings: List[str] = field(default_factory=list)
    component_blocks: List[ComponentBlock] = field(default_factory=list)
    conversions: Dict[str, str] = field(default_factory=dict)

    @property
    def stats(self) -> Dict[str, int]:
        return {
            "components": len(self.component_blocks),
            "usages": sum(len(block.usages) for block in self.component_blocks),
            "conversions": len(self.conversions),
            "warnings": len(self.warnings),
        }


@dataclass
class ConvertResult:
    """Result of converting a file on disk."""

    source: Path
    path: Path
    diff: str
    dry_run: bool
    outcome: ConversionOutcome


class Migrator:
    """Coordinates scanning, resolution, splicing, rules and linting."""

    def __init__(
        self,
        *,
        config: MdxPortConfig | None = None,
        client: GenerativeClient | None = None,
        linter: MdxLinter | None = None,
        rules: Optional[Sequence[Rule]] = None,
        use_ai: bool = True,
    ) -> None:
        self.config = config
        self._client = client
        self.linter = linter or MdxLinter()
        self.rules = list(rules) if rules is not None else list(DEFAULT_RULES)
        self.use_ai = use_ai
        self.logger = get_logger("migrator")

    def scan_text(self, text: str, *, config: MdxPortConfig | None = None) -> ScanResult:
        return self._build_scanner(self._effective_config(config)).scan(text)

    def convert_text(
        self,
        text: str,
        *,
        use_ai: bool | None = None,
        config: MdxPortConfig | None = None,
    ) -> ConversionOutcome:
        """Convert a whole document and return the result with its audit trail."""
        config = self._effective_config(config)
        enabled = self.use_ai if use_ai is None else use_ai
        self.logger.info("Starting conversion (%d chars, generative=%s)", len(text), enabled)

        scan = self._build_scanner(config).scan(text)
        orchestrator = self._build_orchestrator(config, enabled)
        resolution = orchestrator.resolve(scan.component_blocks)
        spliced = splice_conversions(scan.content, resolution.conversions)
        ruled = run_rules(spliced.content, self.rules)
        content = self.linter.lint(ruled.content)

        changes = [*scan.changes, *resolution.changes, *spliced.changes, *ruled.changes]
        if content != ruled.content:
            changes.append(ChangeRecord(type="lint", count=1, detail="normalised whitespace outside code fences"))
        outcome = ConversionOutcome(
            content=content,
            changes=changes,
            warnings=[*resolution.warnings, *spliced.warnings],
            component_blocks=scan.component_blocks,
            conversions=resolution.conversions,
        )
        self.logger.info(
            "Finished conversion: %d component(s), %d warning(s)",
            len(outcome.component_blocks),
            len(outcome.warnings),
        )
        return outcome

    def run_scan(self, path: str) -> ScanResult:
        source = self._resolve_source(path)
        config = self.config or self._load_config(source)
        return self.scan_text(source.read_text(encoding="utf-8"), config=config)

    def run_convert(
        self,
        path: str,
        *,
        output: str | None = None,
        dry_run: bool = False,
        use_ai: bool | None = None,
    ) -> ConvertResult:
        """Convert a file, writing ``<stem>.converted.mdx`` unless ``dry_run`` is set."""
        source = self._resolve_source(path)
        config = self.config or self._load_config(source)
        original = source.read_text(encoding="utf-8")
        outcome = self.convert_text(original, use_ai=use_ai, config=config)

        target = Path(output).expanduser() if output else source.with_name(f"{source.stem}.converted.mdx")
        diff = self._render_diff(original, outcome.content, source.name, target.name)
        if dry_run:
            self.logger.info("Dry run: %s left unwritten", target)
        else:
            target.parent.mkdir(parents=True, exist_ok=True)
            target.write_text(outcome.content, encoding="utf-8")
            self.logger.info("Wrote %s", target)
        return ConvertResult(source=source, path=target, diff=diff, dry_run=dry_run, outcome=outcome)

    def _effective_config(self, config: MdxPortConfig | None) -> MdxPortConfig:
        if config is not None:
            return config
        if self.config is not None:
            return self.config
        return MdxPortConfig(root=Path.cwd())

    def _load_config(self, source: Path) -> MdxPortConfig:
        try:
            return load_config(source)
        except ConfigError as exc:
            self.logger.warning("Ignoring unreadable configuration: %s", exc)
            return MdxPortConfig(root=source.parent)

    @staticmethod
    def _resolve_source(path: str) -> Path:
        source = Path(path).expanduser().resolve()
        if not source.is_file():
            raise FileNotFoundError(f"No such document: {source}")
        if source.suffix.lower() not in SUPPORTED_SUFFIXES:
            raise RuntimeError(f"Unsupported document type '{source.suffix}'; expected .md or .mdx")
        return source

    @staticmethod
    def _build_scanner(config: MdxPortConfig) -> ComponentScanner:
        return ComponentScanner(
            context_chars=config.scanner.context_chars,
            exclude=config.scanner.exclude_components,
            parent_children=config.scanner.parent_children,
        )

    def _build_orchestrator(self, config: MdxPortConfig, use_ai: bool) -> ResolutionOrchestrator:
        timeout = config.llm.request_timeout if config.llm and config.llm.request_timeout else 60.0
        skip = config.resolution.skip_components or PIPELINE_HANDLED_COMPONENTS
        return ResolutionOrchestrator(
            self._resolve_client(config) if use_ai else None,
            batch_size=config.resolution.batch_size,
            retries=config.resolution.retries,
            retry_delay=config.resolution.retry_delay,
            timeout=timeout,
            skip_components=skip,
            use_ai=use_ai,
        )

    def _resolve_client(self, config: MdxPortConfig) -> GenerativeClient:
        if self._client is not None:
            return self._client
        kwargs: Dict[str, object] = {}
        llm_cfg = config.llm
        if llm_cfg is not None:
            if llm_cfg.model:
                kwargs["model"] = llm_cfg.model
            if llm_cfg.base_url:
                kwargs["base_url"] = llm_cfg.base_url
            if llm_cfg.temperature is not None:
                kwargs["temperature"] = llm_cfg.temperature
            if llm_cfg.max_tokens is not None:
                kwargs["max_tokens"] = llm_cfg.max_tokens
            if llm_cfg.api_key:
                kwargs["api_key"] = llm_cfg.api_key
            if llm_cfg.request_timeout is not None:
                kwargs["request_timeout"] = llm_cfg.request_timeout
        return GenerativeClient(LLMRunner(**kwargs))  # type: ignore[arg-type]

    @staticmethod
    def _render_diff(original: str, updated: str, source_name: str, target_name: str) -> str:
        diff = difflib.unified_diff(
            original.splitlines(keepends=True),
            updated.splitlines(keepends=True),
            fromfile=f"{source_name} (original)",
            tofile=f"{target_name} (converted)",
        )
        return "".join(diff)


__all__ = ["ConversionOutcome", "ConvertResult", "Migrator"]
