from __future__ import annotations

from dataclasses import dataclass
from pathlib import Path
from typing import Any, Dict, List, Optional, Tuple

import yaml

from daemon_hunter.contract_store import ContractStore, shipped_contracts
from daemon_hunter.resources import scope_table_path

from .errors import ValidationError
from .model import Scope


@dataclass(frozen=True)
class ScopeSpec:
    scope: Scope
    category: str
    title: str
    directory: str
    domain: str
    privileged: bool

    def resolve_directory(self, home: Path) -> Path:
        if self.directory == "~":
            return home
        if self.directory.startswith("~/"):
            return home / self.directory[2:]
        return Path(self.directory)

    def resolve_domain(self, uid: int) -> str:
        return self.domain.replace("{uid}", str(uid))


@dataclass(frozen=True)
class ScopeTable:
    specs: Tuple[ScopeSpec, ...]
    excluded_label_prefixes: Tuple[str, ...] = ("com.apple.",)
    descriptor_suffix: str = ".plist"

    def get(self, scope: Scope) -> ScopeSpec:
        for spec in self.specs:
            if spec.scope is scope:
                return spec
        raise KeyError(scope)

    def ordered(self) -> List[ScopeSpec]:
        # Scope enum order wins over file order.
        return [self.get(s) for s in Scope]

    def is_excluded(self, label: str) -> bool:
        return any(label.startswith(p) for p in self.excluded_label_prefixes)

    @classmethod
    def from_dict(cls, raw: Dict[str, Any], *, contracts: Optional[ContractStore] = None) -> "ScopeTable":
        store = contracts or shipped_contracts()
        errors = store.validate("scopes.schema.json", raw)
        if errors:
            raise ValidationError(code="scopes.invalid", message="Scope table validation failed", data={"errors": errors})

        specs: List[ScopeSpec] = []
        for item in raw["scopes"]:
            specs.append(
                ScopeSpec(
                    scope=Scope(item["id"]),
                    category=item["category"],
                    title=item["title"],
                    directory=item["directory"],
                    domain=item["domain"],
                    privileged=bool(item["privileged"]),
                )
            )
        if len({s.scope for s in specs}) != len(specs):
            raise ValidationError(code="scopes.duplicate", message="Each scope must be declared exactly once")

        return cls(
            specs=tuple(specs),
            excluded_label_prefixes=tuple(raw["excluded_label_prefixes"]),
            descriptor_suffix=raw["descriptor_suffix"],
        )


def load_scope_table(path: Path | None = None) -> ScopeTable:
    p = path or scope_table_path()
    try:
        raw = yaml.safe_load(p.read_text(encoding="utf-8"))
    except yaml.YAMLError as e:
        raise ValidationError(code="scopes.yaml_invalid", message=f"Cannot parse scope table: {p}") from e
    if not isinstance(raw, dict):
        raise ValidationError(code="scopes.invalid", message="Scope table must be a mapping")
    return ScopeTable.from_dict(raw)
