"""Replace hardcoded color classes with semantic ones."""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from pathlib import Path
from typing import Mapping

from retheme.config.engine import EngineConfig
from retheme.core.mapping import COLOR_CLASS_RE, ORIGIN_INFERRED, ColorMapper
from retheme.core.scanner import AssertionPolicy
from retheme.core.taxonomy import MODE_STANDARD
from retheme.errors import ErrorCode, RethemeError, classify_exception

logger = logging.getLogger(__name__)


@dataclass
class Replacement:
    """One ledger row: every occurrence of ``from_`` became ``to``."""

    from_: str
    to: str
    count: int = 0
    dynamic: bool = False

    def to_dict(self) -> dict:
        return {"from": self.from_, "to": self.to, "count": self.count, "dynamic": self.dynamic}


@dataclass
class RewriteResult:
    changed: bool
    new_content: str
    replacements: list[Replacement] = field(default_factory=list)

    @property
    def replacement_count(self) -> int:
        return sum(r.count for r in self.replacements)


def rewrite_content(
    content: str,
    *,
    rel_path: str,
    mapper: ColorMapper,
    mode: str = MODE_STANDARD,
    policy: AssertionPolicy | None = None,
    color_map: Mapping[str, str] | None = None,
) -> RewriteResult:
    """Rewrite color classes in ``content`` without touching the filesystem.

    Assertion lines in test files come back byte-identical. Line endings
    are preserved because lines are split and re-joined on ``\\n`` only.
    """
    policy = policy or AssertionPolicy()
    test_file = policy.is_test_file(rel_path)
    ledger: dict[tuple[str, str], Replacement] = {}

    def _substitute(match) -> str:
        text = match.group(0)
        if color_map is not None and text in color_map:
            target, dynamic = color_map[text], False
        else:
            target, origin = mapper.suggest(text, mode)
            if target is None:
                return text
            dynamic = origin == ORIGIN_INFERRED
        if target == text:
            return text
        row = ledger.get((text, target))
        if row is None:
            row = ledger[(text, target)] = Replacement(from_=text, to=target, dynamic=dynamic)
        row.count += 1
        return target

    lines = content.split("\n")
    out: list[str] = []
    for line in lines:
        if test_file and policy.is_assertion_line(line):
            out.append(line)
        else:
            out.append(COLOR_CLASS_RE.sub(_substitute, line))
    new_content = "\n".join(out)
    return RewriteResult(
        changed=new_content != content,
        new_content=new_content,
        replacements=list(ledger.values()),
    )


class ColorRewriter:
    """File-level wrapper around :func:`rewrite_content`.

    ``rewrite`` only computes; callers decide whether to ``write``.
    """

    def __init__(self, config: EngineConfig | None = None, mapper: ColorMapper | None = None) -> None:
        self._config = config or EngineConfig()
        self._mapper = mapper or ColorMapper(self._config.extra_mappings)
        self._policy = AssertionPolicy.from_config(self._config)

    def rewrite(
        self,
        file_path: str | Path,
        mode: str = MODE_STANDARD,
        color_map: Mapping[str, str] | None = None,
        *,
        project_root: str | Path | None = None,
    ) -> RewriteResult:
        path = Path(file_path)
        if project_root is not None:
            try:
                rel_path = path.relative_to(project_root).as_posix()
            except ValueError:
                rel_path = path.as_posix()
        else:
            rel_path = path.as_posix()

        if not path.is_file():
            raise RethemeError(ErrorCode.FILE_NOT_FOUND, path=path)
        try:
            with path.open(encoding="utf-8", newline="") as fh:
                content = fh.read()
        except (OSError, UnicodeDecodeError) as exc:
            raise classify_exception(exc, path) from exc

        return rewrite_content(
            content,
            rel_path=rel_path,
            mapper=self._mapper,
            mode=mode,
            policy=self._policy,
            color_map=color_map,
        )

    def write(self, file_path: str | Path, result: RewriteResult) -> bool:
        """Persist a rewrite; returns False when there was nothing to change."""
        if not result.changed:
            return False
        path = Path(file_path)
        try:
            path.write_text(result.new_content, encoding="utf-8", newline="")
        except OSError as exc:
            raise classify_exception(exc, path) from exc
        logger.debug("Rewrote %s (%d replacements)", path, result.replacement_count)
        return True
