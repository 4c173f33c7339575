"""
Collection Codec

Encodes a whole collection (list of models) as UTF-8 JSON and back.

DESIGN DECISION: decode() never raises. It returns a DecodeResult holding
either the collection or a DecodeError, and the caller applies an explicit
policy to the error. The fail-open behaviour of the ledger ("a corrupt blob
loads as empty") is therefore a visible, swappable function rather than a
try/except buried in the load path.
"""

from dataclasses import dataclass
from typing import Callable, Generic, Optional, Sequence, TypeVar

from pydantic import BaseModel, TypeAdapter, ValidationError

from splitledger.models.ledger import Recipient, Transaction
from splitledger.services.storage.interface import DecodeError


ModelT = TypeVar("ModelT", bound=BaseModel)


@dataclass(frozen=True)
class DecodeResult(Generic[ModelT]):
    """Either a decoded collection or the reason decoding failed."""

    value: Optional[list[ModelT]] = None
    error: Optional[DecodeError] = None

    @property
    def ok(self) -> bool:
        return self.error is None

    def unwrap_or_else(self, policy: "DecodeErrorPolicy") -> list[ModelT]:
        """The decoded collection, or whatever the policy makes of the error."""
        if self.error is not None:
            return policy(self.error)
        return list(self.value or [])


DecodeErrorPolicy = Callable[[DecodeError], list]


def empty_collection(error: DecodeError) -> list:
    """Fail-open policy: an undecodable blob becomes an empty collection."""
    return []


def raise_decode_error(error: DecodeError) -> list:
    """Fail-loud policy: surface the decode error to the caller."""
    raise error


DECODE_ERROR_POLICIES: dict[str, DecodeErrorPolicy] = {
    "empty": empty_collection,
    "raise": raise_decode_error,
}


class CollectionCodec(Generic[ModelT]):
    """
    JSON codec for a list of one model type.

    Field names on the wire are the models' camelCase aliases.
    """

    def __init__(self, key: str, model: type[ModelT]):
        self.key = key
        self._adapter = TypeAdapter(list[model])

    def encode(self, items: Sequence[ModelT]) -> bytes:
        """Serialize the full collection (UTF-8 JSON)."""
        return self._adapter.dump_json(list(items), by_alias=True)

    def decode(self, data: bytes) -> DecodeResult[ModelT]:
        """Parse bytes into the collection, capturing any failure."""
        try:
            return DecodeResult(value=self._adapter.validate_json(data))
        except ValidationError as e:
            first = e.errors()[0]
            reason = f"{e.error_count()} error(s), first: {first['msg']} at {first['loc']}"
            return DecodeResult(error=DecodeError(self.key, reason))
        except ValueError as e:
            return DecodeResult(error=DecodeError(self.key, str(e)))


def transactions_codec(key: str = "saved_transactions") -> CollectionCodec[Transaction]:
    return CollectionCodec(key, Transaction)


def recipients_codec(key: str = "recipients") -> CollectionCodec[Recipient]:
    return CollectionCodec(key, Recipient)
