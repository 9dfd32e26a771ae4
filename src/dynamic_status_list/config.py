"""StatusListSettings — configuration for an issuer deployment.

Defaults match the file names the ``dsl`` command line uses. Relative file
names resolve against ``data_dir``. Environment overrides:

=========================  ======================
Variable                   Field
=========================  ======================
``DSL_PERIOD_SECONDS``     ``period_seconds``
``DSL_DATA_DIR``           ``data_dir``
``DSL_DISTRIBUTION_URL``   ``distribution_url``
=========================  ======================
"""
from __future__ import annotations

import os
from collections.abc import Mapping
from pathlib import Path
from typing import Any

from pydantic import BaseModel, ConfigDict, Field, ValidationError

from dynamic_status_list.errors import InputError
from dynamic_status_list.issuance.credentials import DEFAULT_DISTRIBUTION_URL
from dynamic_status_list.protocol.derivation import DEFAULT_PERIOD_SECONDS

_ENV_FIELDS: dict[str, str] = {
    "DSL_PERIOD_SECONDS": "period_seconds",
    "DSL_DATA_DIR": "data_dir",
    "DSL_DISTRIBUTION_URL": "distribution_url",
}


class StatusListSettings(BaseModel):
    """Issuer configuration."""

    model_config = ConfigDict(frozen=True)

    period_seconds: int = Field(default=DEFAULT_PERIOD_SECONDS, gt=0)
    data_dir: Path = Path(".")
    key_file: str = "issuer-key.pem"
    registry_file: str = "dsl-map.json"
    publication_file: str = "dsl.json"
    holder_proof_file: str = "holder_status-list-identifier.json"
    distribution_url: str = DEFAULT_DISTRIBUTION_URL

    @classmethod
    def create(cls, **values: Any) -> "StatusListSettings":
        """Validate *values*, raising InputError instead of ValidationError."""
        try:
            return cls(**values)
        except ValidationError as exc:
            raise InputError(f"invalid configuration: {exc}") from exc

    @classmethod
    def from_env(
        cls,
        environ: Mapping[str, str] | None = None,
        **overrides: Any,
    ) -> "StatusListSettings":
        """Build settings from ``DSL_*`` environment variables.

        Explicit *overrides* whose value is not None win over the environment.
        """
        env = os.environ if environ is None else environ
        values: dict[str, Any] = {
            field_name: env[var] for var, field_name in _ENV_FIELDS.items() if var in env
        }
        values.update({k: v for k, v in overrides.items() if v is not None})
        return cls.create(**values)

    # ------------------------------------------------------------------
    # Resolved paths
    # ------------------------------------------------------------------

    def resolve(self, name: str | Path) -> Path:
        """Resolve *name* against ``data_dir`` unless it is absolute."""
        path = Path(name)
        return path if path.is_absolute() else self.data_dir / path

    @property
    def key_path(self) -> Path:
        return self.resolve(self.key_file)

    @property
    def registry_path(self) -> Path:
        return self.resolve(self.registry_file)

    @property
    def publication_path(self) -> Path:
        return self.resolve(self.publication_file)

    @property
    def holder_proof_path(self) -> Path:
        return self.resolve(self.holder_proof_file)


__all__ = ["StatusListSettings"]
