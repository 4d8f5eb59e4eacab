"""
Modèles de la feature 'bookings' (pydantic).
- Supplies: sélection de fournitures (booléens).
- BookingCreate: payload accepté par POST /api/bookings (champs reconnus uniquement).
- Booking: enregistrement persisté dans bookings.json (clés camelCase).
"""
import logging
from datetime import datetime, timezone
from typing import Any, Dict, Literal, Optional, Union

from pydantic import AliasChoices, BaseModel, ConfigDict, Field, ValidationError, field_validator

logger = logging.getLogger(__name__)

# Valeurs autorisées dans la map 'extra' (pas d'objets imbriqués)
ExtraValue = Union[str, int, float, bool, None]

STATUS_PENDING = "pending"
STATUS_PAID = "paid"

def utc_now_iso() -> str:
    return datetime.now(timezone.utc).isoformat().replace("+00:00", "Z")

class Supplies(BaseModel):
    model_config = ConfigDict(populate_by_name=True, extra="ignore")

    box: bool = False
    mailer: bool = False
    tape: bool = False
    label_print: bool = Field(default=False, alias="labelPrint")

class BookingCreate(BaseModel):
    """
    Payload client pour créer une réservation.
    - Les champs inconnus au premier niveau sont ignorés (pas de fusion brute dans l'enregistrement).
    - Les métadonnées libres passent uniquement par 'extra'.
    - pickupDateTime (ancien nom) est accepté comme alias de pickupDateTimeISO.
    """
    model_config = ConfigDict(populate_by_name=True, extra="ignore")

    address: str = Field(min_length=1, max_length=500)
    first_name: Optional[str] = Field(default=None, alias="firstName", max_length=200)
    last_name: Optional[str] = Field(default=None, alias="lastName", max_length=200)
    email: Optional[str] = Field(default=None, max_length=320)
    phone: Optional[str] = Field(default=None, max_length=50)
    pickup_date_time_iso: Optional[str] = Field(
        default=None,
        validation_alias=AliasChoices("pickupDateTimeISO", "pickupDateTime", "pickup_date_time_iso"),
    )
    notes: Optional[str] = Field(default=None, max_length=2000)
    supplies: Supplies = Field(default_factory=Supplies)
    extra: Dict[str, ExtraValue] = Field(default_factory=dict)

    @field_validator("address")
    @classmethod
    def _address_not_blank(cls, v: str) -> str:
        v = v.strip()
        if not v:
            raise ValueError("address must not be blank")
        return v

    @field_validator("supplies", mode="before")
    @classmethod
    def _supplies_none_to_default(cls, v):
        return {} if v is None else v

    @field_validator("pickup_date_time_iso", mode="before")
    @classmethod
    def _empty_pickup_to_none(cls, v):
        return v or None

class Booking(BaseModel):
    model_config = ConfigDict(populate_by_name=True, extra="ignore")

    booking_id: str = Field(alias="bookingId")
    status: Literal["pending", "paid"] = STATUS_PENDING
    created_at_iso: str = Field(default_factory=utc_now_iso, alias="createdAtISO")
    paid_at_iso: Optional[str] = Field(default=None, alias="paidAtISO")
    first_name: Optional[str] = Field(default=None, alias="firstName")
    last_name: Optional[str] = Field(default=None, alias="lastName")
    email: Optional[str] = None
    phone: Optional[str] = None
    # Défaut vide: anciens enregistrements sans adresse exploitable
    address: str = ""
    pickup_date_time_iso: Optional[str] = Field(default=None, alias="pickupDateTimeISO")
    notes: Optional[str] = None
    supplies: Supplies = Field(default_factory=Supplies)
    miles: float = 0.0
    amount_cents: int = Field(default=0, alias="amountCents")
    payment_intent_id: Optional[str] = Field(default=None, alias="paymentIntentId")
    extra: Dict[str, ExtraValue] = Field(default_factory=dict)

    @field_validator("supplies", mode="before")
    @classmethod
    def _supplies_none_to_default(cls, v):
        return {} if v is None else v

    @classmethod
    def from_row(cls, row: Dict[str, Any]) -> "Booking":
        """
        Relit un enregistrement de bookings.json.
        - Les anciens enregistrements peuvent porter des valeurs hors modèle (corps de requête fusionné):
          ces champs sont écartés, journalisés, et remplacés par leur valeur par défaut.
        - Le dict stocké n'est jamais modifié ici.
        """
        try:
            return cls.model_validate(row)
        except ValidationError as e:
            bad = {err["loc"][0] for err in e.errors() if err.get("loc")}
            logger.warning(
                "booking row does not fit the model bookingId=%s fields=%s",
                row.get("bookingId"), sorted(str(f) for f in bad),
            )
            return cls.model_validate({k: v for k, v in row.items() if k not in bad})

    @classmethod
    def from_create(
        cls,
        payload: BookingCreate,
        *,
        booking_id: str,
        miles: float,
        amount_cents: int,
        payment_intent_id: Optional[str] = None,
    ) -> "Booking":
        return cls(
            booking_id=booking_id,
            first_name=payload.first_name,
            last_name=payload.last_name,
            email=payload.email,
            phone=payload.phone,
            address=payload.address,
            pickup_date_time_iso=payload.pickup_date_time_iso,
            notes=payload.notes,
            supplies=payload.supplies,
            miles=miles,
            amount_cents=amount_cents,
            payment_intent_id=payment_intent_id,
            extra=dict(payload.extra),
        )

    def to_json(self) -> dict:
        """Dict JSON-compatible avec les clés camelCase du fichier et de l'API."""
        return self.model_dump(by_alias=True, mode="json")

    @property
    def is_paid(self) -> bool:
        return self.status == STATUS_PAID
