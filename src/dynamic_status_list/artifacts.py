"""Pydantic models for the JSON artifacts read from and written to disk."""
from __future__ import annotations

from pathlib import Path
from typing import Literal, TypeVar

from pydantic import BaseModel, ConfigDict, Field, StrictBool, ValidationError

from dynamic_status_list.errors import InputError
from dynamic_status_list.storage import load_json, save_json

PUBLICATION_TYPE = "dsl/v1"


class CredentialBundleFile(BaseModel):
    """A credential plus the status metadata handed to its holder."""

    jwt: str
    private_metadata: str = ""
    detached_dsl_jwt: str = ""


class PublicationEnvelope(BaseModel):
    """Storage envelope around a signed publication (``dsl.json``)."""

    dsl_jwt: str
    nbf: int


class PublicationClaims(BaseModel):
    """Claim set of a signed publication."""

    model_config = ConfigDict(extra="ignore")

    typ: Literal["dsl/v1"]
    iss: str
    nbf: int
    exp: int
    nxt: int
    sid: list[str] = Field(default_factory=list)


class HolderProofFile(BaseModel):
    """Holder-side proof artifact (``holder_status-list-identifier.json``)."""

    jti: str
    token: str
    sid: str
    iat: int
    revoked: StrictBool


class PrivateMetadataClaims(BaseModel):
    """Claims of the private metadata token issued alongside a credential."""

    model_config = ConfigDict(extra="ignore")

    sub: str
    seed: str = ""


# ------------------------------------------------------------------
# File helpers
# ------------------------------------------------------------------

ModelT = TypeVar("ModelT", bound=BaseModel)


def parse_model(model: type[ModelT], data: object, source: str) -> ModelT:
    """Validate *data* against *model*, raising InputError on failure."""
    try:
        return model.model_validate(data)
    except ValidationError as exc:
        raise InputError(f"invalid {source}: {exc}") from exc


def read_model(model: type[ModelT], path: Path) -> ModelT:
    """Load a JSON file and validate it against *model*."""
    return parse_model(model, load_json(path), str(path))


def write_model(instance: BaseModel, path: Path) -> None:
    """Write a model instance as indented JSON."""
    save_json(instance.model_dump(mode="json"), path)


__all__ = [
    "CredentialBundleFile",
    "HolderProofFile",
    "PUBLICATION_TYPE",
    "PrivateMetadataClaims",
    "PublicationClaims",
    "PublicationEnvelope",
    "parse_model",
    "read_model",
    "write_model",
]
